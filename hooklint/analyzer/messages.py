"""Diagnostic identifiers and their human-readable messages."""

AVOID_INTERNAL_EFFECT = 'avoidInternalEffect'
AVOID_PARENT_CHILD_COUPLING = 'avoidParentChildCoupling'
AVOID_RESETTING_STATE_FROM_PROPS = 'avoidResettingStateFromProps'

MESSAGES = {
    AVOID_INTERNAL_EFFECT: (
        "This effect only reacts to internal state and props. "
        "Derive the value during render or do the work in the event handler that changes it."
    ),
    AVOID_PARENT_CHILD_COUPLING: (
        "Avoid notifying the parent from an effect. "
        "Call the parent's callback from the event handler, or lift the state up."
    ),
    AVOID_RESETTING_STATE_FROM_PROPS: (
        "This effect resets all state when a prop changes. "
        "Give the component a `key` from the parent instead."
    ),
}
