"""Node kinds and small helpers over tree-sitter syntax nodes.

tree-sitter tags nodes with open-ended type strings and hands out a fresh
wrapper object every time a node is reached. Everything above this module
dispatches on ``NodeKind`` and compares nodes through ``node_key``.
"""
from enum import Enum
from typing import List, Optional, Tuple
from tree_sitter import Node


class NodeKind(Enum):
    """Closed set of node families the analyzer reasons about."""
    PROGRAM = 'program'
    CALL = 'call'
    NEW = 'new'
    DECLARATOR = 'declarator'
    LEXICAL_DECLARATION = 'lexical_declaration'
    VAR_DECLARATION = 'var_declaration'
    FUNCTION_DECLARATION = 'function_declaration'
    FUNCTION_EXPRESSION = 'function_expression'
    ARROW_FUNCTION = 'arrow_function'
    METHOD = 'method'
    CLASS_DECLARATION = 'class_declaration'
    CLASS_EXPRESSION = 'class_expression'
    IDENTIFIER = 'identifier'
    SHORTHAND_IDENTIFIER = 'shorthand_identifier'
    SHORTHAND_PATTERN = 'shorthand_pattern'
    MEMBER = 'member'
    SUBSCRIPT = 'subscript'
    ARRAY = 'array'
    ARRAY_PATTERN = 'array_pattern'
    OBJECT_PATTERN = 'object_pattern'
    PAIR_PATTERN = 'pair_pattern'
    ASSIGNMENT_PATTERN = 'assignment_pattern'
    OBJECT_ASSIGNMENT_PATTERN = 'object_assignment_pattern'
    REST_PATTERN = 'rest_pattern'
    TS_PARAMETER = 'ts_parameter'
    FORMAL_PARAMETERS = 'formal_parameters'
    ARGUMENTS = 'arguments'
    ASSIGNMENT = 'assignment'
    AUGMENTED_ASSIGNMENT = 'augmented_assignment'
    UPDATE = 'update'
    STATEMENT_BLOCK = 'statement_block'
    FOR = 'for'
    FOR_IN = 'for_in'
    CATCH = 'catch'
    SWITCH_BODY = 'switch_body'
    EXPORT = 'export'
    EXPORT_SPECIFIER = 'export_specifier'
    IMPORT_CLAUSE = 'import_clause'
    IMPORT_SPECIFIER = 'import_specifier'
    NAMESPACE_IMPORT = 'namespace_import'
    PARENTHESIZED = 'parenthesized'
    JSX_ELEMENT_NAME_HOLDER = 'jsx_element_name_holder'
    JSX_NAME_PART = 'jsx_name_part'
    TYPE_ONLY = 'type_only'
    COMMENT = 'comment'
    OTHER = 'other'


# Grammar versions disagree on a few names ('function' became
# 'function_expression' in tree-sitter-javascript 0.21).
_KIND_BY_TYPE = {
    'program': NodeKind.PROGRAM,
    'call_expression': NodeKind.CALL,
    'new_expression': NodeKind.NEW,
    'variable_declarator': NodeKind.DECLARATOR,
    'lexical_declaration': NodeKind.LEXICAL_DECLARATION,
    'variable_declaration': NodeKind.VAR_DECLARATION,
    'function_declaration': NodeKind.FUNCTION_DECLARATION,
    'generator_function_declaration': NodeKind.FUNCTION_DECLARATION,
    'function_expression': NodeKind.FUNCTION_EXPRESSION,
    'function': NodeKind.FUNCTION_EXPRESSION,
    'generator_function': NodeKind.FUNCTION_EXPRESSION,
    'arrow_function': NodeKind.ARROW_FUNCTION,
    'method_definition': NodeKind.METHOD,
    'class_declaration': NodeKind.CLASS_DECLARATION,
    'abstract_class_declaration': NodeKind.CLASS_DECLARATION,
    'class': NodeKind.CLASS_EXPRESSION,
    'identifier': NodeKind.IDENTIFIER,
    'shorthand_property_identifier': NodeKind.SHORTHAND_IDENTIFIER,
    'shorthand_property_identifier_pattern': NodeKind.SHORTHAND_PATTERN,
    'member_expression': NodeKind.MEMBER,
    'subscript_expression': NodeKind.SUBSCRIPT,
    'array': NodeKind.ARRAY,
    'array_pattern': NodeKind.ARRAY_PATTERN,
    'object_pattern': NodeKind.OBJECT_PATTERN,
    'pair_pattern': NodeKind.PAIR_PATTERN,
    'assignment_pattern': NodeKind.ASSIGNMENT_PATTERN,
    'object_assignment_pattern': NodeKind.OBJECT_ASSIGNMENT_PATTERN,
    'rest_pattern': NodeKind.REST_PATTERN,
    'required_parameter': NodeKind.TS_PARAMETER,
    'optional_parameter': NodeKind.TS_PARAMETER,
    'formal_parameters': NodeKind.FORMAL_PARAMETERS,
    'arguments': NodeKind.ARGUMENTS,
    'assignment_expression': NodeKind.ASSIGNMENT,
    'augmented_assignment_expression': NodeKind.AUGMENTED_ASSIGNMENT,
    'update_expression': NodeKind.UPDATE,
    'statement_block': NodeKind.STATEMENT_BLOCK,
    'for_statement': NodeKind.FOR,
    'for_in_statement': NodeKind.FOR_IN,
    'catch_clause': NodeKind.CATCH,
    'switch_body': NodeKind.SWITCH_BODY,
    'export_statement': NodeKind.EXPORT,
    'export_specifier': NodeKind.EXPORT_SPECIFIER,
    'import_clause': NodeKind.IMPORT_CLAUSE,
    'import_specifier': NodeKind.IMPORT_SPECIFIER,
    'namespace_import': NodeKind.NAMESPACE_IMPORT,
    'parenthesized_expression': NodeKind.PARENTHESIZED,
    'jsx_opening_element': NodeKind.JSX_ELEMENT_NAME_HOLDER,
    'jsx_closing_element': NodeKind.JSX_ELEMENT_NAME_HOLDER,
    'jsx_self_closing_element': NodeKind.JSX_ELEMENT_NAME_HOLDER,
    'nested_identifier': NodeKind.JSX_NAME_PART,
    'jsx_namespace_name': NodeKind.JSX_NAME_PART,
    'type_annotation': NodeKind.TYPE_ONLY,
    'type_arguments': NodeKind.TYPE_ONLY,
    'type_parameters': NodeKind.TYPE_ONLY,
    'type_alias_declaration': NodeKind.TYPE_ONLY,
    'interface_declaration': NodeKind.TYPE_ONLY,
    'comment': NodeKind.COMMENT,
}

FUNCTION_KINDS = frozenset({
    NodeKind.FUNCTION_DECLARATION,
    NodeKind.FUNCTION_EXPRESSION,
    NodeKind.ARROW_FUNCTION,
    NodeKind.METHOD,
})

IDENTIFIER_KINDS = frozenset({NodeKind.IDENTIFIER, NodeKind.SHORTHAND_IDENTIFIER})

NodeKey = Tuple[str, int, int]


def kind_of(node: Optional[Node]) -> NodeKind:
    """Map a node's type string onto its NodeKind."""
    if node is None:
        return NodeKind.OTHER
    return _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)


def node_key(node: Node) -> NodeKey:
    """Stable identity for a node within one tree."""
    return (node.type, node.start_byte, node.end_byte)


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    if a is None or b is None:
        return False
    return node_key(a) == node_key(b)


def node_text(node: Node) -> str:
    return node.text.decode('utf-8', errors='replace')


def field(node: Optional[Node], name: str) -> Optional[Node]:
    """``child_by_field_name`` that tolerates a missing node."""
    if node is None:
        return None
    return node.child_by_field_name(name)


def is_field_of(child: Node, parent: Optional[Node], name: str) -> bool:
    """True if ``child`` sits in field ``name`` of ``parent``."""
    return same_node(field(parent, name), child)


def named_children(node: Optional[Node]) -> List[Node]:
    """Named children without comments."""
    if node is None:
        return []
    return [child for child in node.named_children if kind_of(child) is not NodeKind.COMMENT]


def call_arguments(call: Node) -> List[Node]:
    """Argument expressions of a call, in order."""
    return named_children(field(call, 'arguments'))


def identifier_name(node: Optional[Node]) -> Optional[str]:
    """Name of a plain identifier node, else None."""
    if kind_of(node) is NodeKind.IDENTIFIER:
        return node_text(node)
    return None


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while kind_of(node) is NodeKind.PARENTHESIZED:
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node


def structurally_equal(a: Optional[Node], b: Optional[Node]) -> bool:
    """Compare two expressions by tree shape.

    Node types must match at every level, leaves must carry the same text,
    comments and redundant parentheses are ignored. Two absent expressions
    are equal.
    """
    a, b = unwrap_parens(a), unwrap_parens(b)
    if a is None or b is None:
        return a is None and b is None
    if a.type != b.type:
        return False

    a_children = [child for child in a.children if kind_of(child) is not NodeKind.COMMENT]
    b_children = [child for child in b.children if kind_of(child) is not NodeKind.COMMENT]
    if not a_children and not b_children:
        return a.text == b.text
    if len(a_children) != len(b_children):
        return False
    return all(structurally_equal(x, y) for x, y in zip(a_children, b_children))


def ancestors(node: Node):
    """Yield the parents of ``node`` from nearest to the root."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent
