"""
Registry of builtin hooks.

Builtin hooks are referenced as ``$(name)`` and resolved here by name.
New builtins are added with ``register()``; there is no lookup by import
path.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)


class BuiltinHookRegistry:
    """
    Registry of builtin hooks by name.

    Values are expected to be callables taking ``(descriptor, *args)``.
    The registry does not enforce this; the hook parser reports
    non-callable entries when they are referenced.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, _typing.Any] = {}

    def register(self, name: str, hook: _typing.Any) -> None:
        """
        Register a builtin hook.

        Args:
            name: Name used in ``$(name)`` references
            hook: The hook callable

        Raises:
            ValueError: If a hook with the same name is already registered
        """
        if name in self._hooks:
            raise ValueError(f"Builtin hook '{name}' is already registered")
        self._hooks[name] = hook
        _logger.debug("Registered builtin hook %s", name)

    def get(self, name: str) -> _typing.Any | None:
        """Get a hook by name, or None if not registered."""
        return self._hooks.get(name)

    def get_or_raise(self, name: str) -> _typing.Any:
        """
        Get a hook by name, raising if not found.

        Raises:
            KeyError: If the hook is not registered
        """
        if name not in self._hooks:
            available = ", ".join(self.list_names())
            raise KeyError(f"Builtin hook '{name}' not found. Available: {available}")
        return self._hooks[name]

    def list_names(self) -> list[str]:
        """Sorted list of registered names."""
        return sorted(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, name: str) -> bool:
        return name in self._hooks


# Global default registry
_default_registry: BuiltinHookRegistry | None = None


def get_default_registry() -> BuiltinHookRegistry:
    """
    Get the default registry.

    Lazily initialized with the builtin hooks shipped with buildhooks.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = create_default_registry()
    return _default_registry


def create_default_registry() -> BuiltinHookRegistry:
    """Create a new registry with ``pkgconfig`` and ``extra-vars`` registered."""
    # Import here to avoid circular imports
    import buildhooks.builtin as builtin

    registry = BuiltinHookRegistry()
    for name, hook in builtin.BUILTIN_HOOKS.items():
        registry.register(name, hook)
    return registry
