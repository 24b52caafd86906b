"""Behaves Error System.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints
- Context for debugging

Both conformance failures derive from ``NotImplementedError`` as well, so
callers that only know the builtin hierarchy still catch them.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from behaves.types import Scope


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        1xxx - Declaration errors
        2xxx - Conformance errors
        5xxx - Configuration errors
    """

    # 1xxx - Declaration Errors
    NO_DECLARATION = 1001
    INVALID_OPERATION_NAME = 1002
    INVALID_DEFAULT_BLOCK = 1003
    INVALID_ENTITY = 1004

    # 2xxx - Conformance Errors
    NOT_CONFORMING = 2001
    WRONG_SCOPE = 2002

    # 5xxx - Configuration Errors
    CONFIG_INVALID = 5001
    CONFIG_PARSE_ERROR = 5002
    MODULE_IMPORT_FAILED = 5003

    @property
    def category(self) -> str:
        """Get the category name for this error code."""
        categories = {
            1: "declaration",
            2: "conformance",
            5: "config",
        }
        return categories.get(self.value // 1000, "unknown")

    @property
    def is_recoverable(self) -> bool:
        """Whether the program can reasonably carry on after this error."""
        return self.value // 1000 == 5


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NO_DECLARATION: "Expected `{provider}` to define behaviors, but none found.",
    ErrorCode.INVALID_OPERATION_NAME: "Invalid operation name {name!r} for {scope} scope: {detail}",
    ErrorCode.INVALID_DEFAULT_BLOCK: "Default behaviors for `{provider}` must be callable, got {detail}",
    ErrorCode.INVALID_ENTITY: "Expected a class, got {detail}",
    ErrorCode.NOT_CONFORMING: (
        "Expected `{conformer}` to behave like `{provider}`, but the following "
        "{scope} methods are unimplemented: {missing}."
    ),
    ErrorCode.WRONG_SCOPE: (
        "Expected `{conformer}` to behave like `{provider}`, but the following "
        "{scope} methods are unimplemented: {missing}.\n"
        "The following {scope} methods appear to be defined, but in the wrong scope: {wrong}."
    ),
    ErrorCode.CONFIG_INVALID: "Invalid configuration value for '{key}': {detail}",
    ErrorCode.CONFIG_PARSE_ERROR: "Could not parse config file {path}: {detail}",
    ErrorCode.MODULE_IMPORT_FAILED: "Could not import '{module}': {detail}",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.NO_DECLARATION: [
        "Decorate `{provider}` with @implements(...) before requesting conformance",
        "Check that `{provider}` is the class you meant to conform to",
    ],
    ErrorCode.NOT_CONFORMING: [
        "Define the missing methods on `{conformer}`",
        "Supply defaults on `{provider}` with @inject_behaviors(...)",
    ],
    ErrorCode.WRONG_SCOPE: [
        "Rename the methods so their leading underscore matches the {scope} scope",
    ],
    ErrorCode.CONFIG_INVALID: [
        "Fix '{key}' in .behaves/config.yaml",
        "Unset the matching BEHAVES_* environment variable",
    ],
    ErrorCode.MODULE_IMPORT_FAILED: [
        "Check that '{module}' is importable from the current directory",
    ],
}


def _display_name(entity: Any) -> str:
    """Display name for a provider or conformer."""
    return getattr(entity, "__name__", None) or repr(entity)


def _backticked(names: Sequence[str]) -> str:
    return ", ".join(f"`{name}`" for name in names)


class BehavesError(Exception):
    """Base error type for all behaves errors.

    Example:
        >>> err = BehavesError(
        ...     code=ErrorCode.NO_DECLARATION,
        ...     context={"provider": "Animal"},
        ... )
        >>> print(err)
        [BH-1001] Expected `Animal` to define behaviors, but none found.
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def is_recoverable(self) -> bool:
        return self.code.is_recoverable

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'BH-2001')."""
        return f"BH-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging and JSON output."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recoverable": self.is_recoverable,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }


class NoDeclarationError(BehavesError, NotImplementedError):
    """A provider was asked for requirements it never declared."""

    def __init__(self, provider: type, scope: Scope | None = None):
        self.provider = provider
        self.scope = scope
        super().__init__(
            code=ErrorCode.NO_DECLARATION,
            context={
                "provider": _display_name(provider),
                "scope": scope.value if scope is not None else "all",
            },
        )


class ConformanceError(BehavesError, NotImplementedError):
    """A conformer is missing at least one required operation in one scope.

    ``unimplemented`` keeps the order in which the provider declared the
    requirements. ``wrong_scope`` is the subset of ``unimplemented`` that the
    conformer does define, but in another scope.
    """

    def __init__(
        self,
        conformer: type,
        provider: type,
        scope: Scope,
        unimplemented: Sequence[str],
        wrong_scope: Sequence[str] = (),
    ):
        self.conformer = conformer
        self.provider = provider
        self.scope = scope
        self.unimplemented = tuple(unimplemented)
        self.wrong_scope = tuple(wrong_scope)
        super().__init__(
            code=ErrorCode.WRONG_SCOPE if self.wrong_scope else ErrorCode.NOT_CONFORMING,
            context={
                "conformer": _display_name(conformer),
                "provider": _display_name(provider),
                "scope": scope.value,
                "missing": _backticked(self.unimplemented),
                "wrong": _backticked(self.wrong_scope),
                "unimplemented": list(self.unimplemented),
                "wrong_scope": list(self.wrong_scope),
            },
        )


# Convenience factory functions


def name_error(name: object, scope: Scope, detail: str) -> BehavesError:
    """Create an INVALID_OPERATION_NAME error."""
    return BehavesError(
        code=ErrorCode.INVALID_OPERATION_NAME,
        context={"name": name, "scope": scope.value, "detail": detail},
    )


def entity_error(entity: object) -> BehavesError:
    """Create an INVALID_ENTITY error for something that is not a class."""
    return BehavesError(
        code=ErrorCode.INVALID_ENTITY,
        context={"detail": f"{type(entity).__name__} {entity!r}"},
    )


def config_error(
    code: ErrorCode,
    key: str = "",
    detail: str = "",
    path: str = "",
    cause: Exception | None = None,
) -> BehavesError:
    """Create a configuration error."""
    return BehavesError(
        code=code,
        context={"key": key, "detail": detail, "path": path},
        cause=cause,
    )
