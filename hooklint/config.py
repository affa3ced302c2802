"""Configuration management for hooklint.

Loads environment variables (optionally from a .env file in the working
directory) and provides centralized config access.
"""
import hashlib
import os
import re
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from hooklint.analyzer.context import DEFAULT_GLOBALS, HookNames
from hooklint.analyzer.rules import RULE_NAMES

__version__ = "0.3.0"

_JS_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


def _split_list(raw: Optional[str], default: tuple) -> tuple:
    """Parse a comma-separated environment value."""
    if raw is None:
        return tuple(default)
    return tuple(item.strip() for item in raw.split(',') if item.strip())


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize config by loading .env file.

        Args:
            env_path: Explicit .env location (defaults to ./.env)

        Raises:
            ValueError: If a configured hook or rule name is invalid
        """
        load_dotenv(env_path or Path.cwd() / ".env")
        self._validate()

    def _validate(self):
        """Validate configured names.

        Raises:
            ValueError: If a hook list is empty, contains something that is
                not a JavaScript identifier, or a disabled rule is unknown
        """
        for variable, names in (
            ("HOOKLINT_EFFECT_HOOKS", self.effect_hooks),
            ("HOOKLINT_STATE_HOOKS", self.state_hooks),
        ):
            if not names:
                raise ValueError(f"{variable} must name at least one hook.")
        for variable, names in (
            ("HOOKLINT_EFFECT_HOOKS", self.effect_hooks),
            ("HOOKLINT_STATE_HOOKS", self.state_hooks),
            ("HOOKLINT_REACT_NAMESPACES", self.react_namespaces),
            ("HOOKLINT_COMPONENT_WRAPPERS", self.component_wrappers),
        ):
            invalid = [name for name in names if not _JS_IDENTIFIER.match(name)]
            if invalid:
                raise ValueError(f"{variable} contains invalid identifier(s): {', '.join(invalid)}")

        unknown = set(self.disabled_rules) - set(RULE_NAMES)
        if unknown:
            raise ValueError(
                f"HOOKLINT_DISABLE names unknown rule(s): {', '.join(sorted(unknown))}"
            )

    @property
    def effect_hooks(self) -> tuple:
        """Effect primitives, e.g. useEffect or useLayoutEffect."""
        return _split_list(os.getenv("HOOKLINT_EFFECT_HOOKS"), ("useEffect",))

    @property
    def state_hooks(self) -> tuple:
        """State constructor primitives."""
        return _split_list(os.getenv("HOOKLINT_STATE_HOOKS"), ("useState",))

    @property
    def react_namespaces(self) -> tuple:
        """Objects the primitives may be accessed through (React.useEffect)."""
        return _split_list(os.getenv("HOOKLINT_REACT_NAMESPACES"), ("React",))

    @property
    def component_wrappers(self) -> tuple:
        """Higher-order calls that still declare a component (memo, forwardRef)."""
        return _split_list(os.getenv("HOOKLINT_COMPONENT_WRAPPERS"), ("memo", "forwardRef"))

    @property
    def global_names(self) -> tuple:
        """Ambient globals that resolve without a declaration."""
        return _split_list(os.getenv("HOOKLINT_GLOBALS"), DEFAULT_GLOBALS)

    @property
    def disabled_rules(self) -> tuple:
        return _split_list(os.getenv("HOOKLINT_DISABLE"), ())

    @property
    def cache_dir(self) -> str:
        """Cache directory name, relative to the project root."""
        return os.getenv("HOOKLINT_CACHE_DIR", ".hooklint_cache")

    def hook_names(self) -> HookNames:
        return HookNames(
            effect_hooks=frozenset(self.effect_hooks),
            state_hooks=frozenset(self.state_hooks),
            namespaces=frozenset(self.react_namespaces),
            component_wrappers=frozenset(self.component_wrappers),
        )

    def fingerprint(self) -> str:
        """Hash of every setting that changes analysis results.

        Returns:
            Hex digest, part of every cache key
        """
        parts = [
            __version__,
            ",".join(sorted(self.effect_hooks)),
            ",".join(sorted(self.state_hooks)),
            ",".join(sorted(self.react_namespaces)),
            ",".join(sorted(self.component_wrappers)),
            ",".join(sorted(self.global_names)),
        ]
        return hashlib.sha256("|".join(parts).encode()).hexdigest()[:16]


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config
    _config = None
