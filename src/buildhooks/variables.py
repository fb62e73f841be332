"""
Additive and conditional merging of build variables.

Extra values are appended to variables that already hold a non-empty
string. Variables that are missing, blank or not strings are never
created or touched here.

Values may be given either as a string or as a list of strings::

    build:
      extra_variables:
        CFLAGS: ["-Wall", "-Wextra"]
        LIBFLAG: "-lm"
      conditional_variables:
        ENABLE_COVERAGE:
          CFLAGS: "--coverage"

Conditional entries are only appended when the environment variable named
by the flag is set to ``"1"`` or ``"true"``.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import os as _os
import typing as _typing

if _typing.TYPE_CHECKING:
    import buildhooks.descriptor as descriptor_mod

_logger = _logging.getLogger(__name__)

# Environment values that enable a conditional flag (exact match)
ENABLED_FLAG_VALUES = frozenset({"1", "true"})


class VariableValueError(ValueError):
    """Raised for malformed extra/conditional variable configuration."""

    pass


def normalize_value(value: _typing.Any) -> str:
    """
    Validate a variable value and flatten it into a single string.

    Args:
        value: A string, or a list of strings.

    Returns:
        The stripped string, or the stripped non-empty list elements
        joined with single spaces. May be empty.

    Raises:
        VariableValueError: If the value is not a string or a list of strings.
    """
    if isinstance(value, str):
        return value.strip()

    if isinstance(value, _abc.Mapping):
        # Keyed entries never form a list of values
        for key in value:
            raise VariableValueError(f"variable-value#{key} must be a string")
        return ""

    if isinstance(value, (list, tuple)):
        parts: list[str] = []
        for index, item in enumerate(value, start=1):
            if not isinstance(item, str):
                raise VariableValueError(f"variable-value#{index} must be a string")
            item = item.strip()
            if item:
                parts.append(item)
        return " ".join(parts)

    raise VariableValueError("variable-value must be a string or an array of strings")


def get_variable(variables: _abc.Mapping[str, _typing.Any], name: str) -> str | None:
    """Return the stripped current value, or None if missing, blank or not a string."""
    value = variables.get(name, "")
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def append_variables(
    variables: dict[str, _typing.Any],
    entries: _abc.Mapping[_typing.Any, _typing.Any],
    source_label: str,
) -> None:
    """
    Append each entry's value to the matching existing variable.

    Args:
        variables: The variable store, modified in place.
        entries: Variable name -> string or list of strings.
        source_label: Field path used in error messages,
            e.g. ``build.extra_variables``.

    Raises:
        VariableValueError: On a non-string name or a malformed value.
    """
    for name, value in entries.items():
        if not isinstance(name, str):
            raise VariableValueError(
                f"{source_label}[{name!r}] variable-name must be a string"
            )

        try:
            extra = normalize_value(value)
        except VariableValueError as e:
            raise VariableValueError(f'{source_label}["{name}"] {e}') from e

        current = get_variable(variables, name)
        if current is None:
            _logger.info(
                "skipping %s: variables.%s is not a string or empty", name, name
            )
        elif not extra:
            _logger.info("skipping %s: extra value is empty", name)
        else:
            _logger.info(
                'append %s values "%s" to existing value "%s"', name, extra, current
            )
            variables[name] = f"{current} {extra}"


def is_flag_enabled(
    name: str,
    environ: _abc.Mapping[str, str] | None = None,
) -> bool:
    """Check whether the environment enables a conditional flag."""
    if environ is None:
        environ = _os.environ
    return environ.get(name) in ENABLED_FLAG_VALUES


def append_conditional_variables(
    variables: dict[str, _typing.Any],
    conditional: _abc.Mapping[_typing.Any, _typing.Any],
    source_label: str,
    environ: _abc.Mapping[str, str] | None = None,
) -> None:
    """
    Append the entries of every enabled flag.

    Every flag entry must be a mapping, whether the flag is enabled or not.

    Args:
        variables: The variable store, modified in place.
        conditional: Flag name -> mapping of variable name -> value.
        source_label: Field path used in error messages.
        environ: Environment to read flags from. Defaults to ``os.environ``.

    Raises:
        VariableValueError: On malformed configuration.
    """
    for flag, entries in conditional.items():
        label = f'{source_label}["{flag}"]'
        if not isinstance(flag, str):
            raise VariableValueError(
                f"{source_label}[{flag!r}] flag-name must be a string"
            )
        if not isinstance(entries, _abc.Mapping):
            raise VariableValueError(f"{label} should be a mapping")

        if not is_flag_enabled(flag, environ):
            _logger.info("skipping %s: %s is not enabled", label, flag)
            continue

        _logger.info("%s is enabled", flag)
        append_variables(variables, entries, label)


def append_extra_vars(
    descriptor: descriptor_mod.BuildDescriptor,
    *args: str,
    environ: _abc.Mapping[str, str] | None = None,
) -> None:
    """
    The ``$(extra-vars)`` builtin hook.

    Appends ``build.extra_variables`` to the variable store, then the
    entries of every enabled flag in ``build.conditional_variables``.

    Raises:
        VariableValueError: If either field is set but not a mapping, or
            holds malformed entries. None and False both mean unset.
    """
    build = descriptor.build

    extra_vars = build.extra_variables
    if extra_vars is not None and extra_vars is not False:
        if not isinstance(extra_vars, _abc.Mapping):
            raise VariableValueError(
                "builtin-hook.extra-vars: build.extra_variables should be a mapping"
            )
        _logger.info("builtin-hook.extra-vars: adding extra_variables...")
        append_variables(descriptor.variables, extra_vars, "build.extra_variables")

    conditional = build.conditional_variables
    if conditional is not None and conditional is not False:
        if not isinstance(conditional, _abc.Mapping):
            raise VariableValueError(
                "builtin-hook.extra-vars: build.conditional_variables should be a mapping"
            )
        _logger.info("builtin-hook.extra-vars: adding conditional_variables...")
        append_conditional_variables(
            descriptor.variables,
            conditional,
            "build.conditional_variables",
            environ,
        )
