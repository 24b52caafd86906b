"""Core types for behavior declarations and conformance checks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DefinitionBlock = Callable[..., Any]
"""A deferred unit of definitions; called with a ``DefinitionContext``."""


class Scope(Enum):
    """Visibility partition of a required or implemented operation."""

    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def others(self) -> tuple[Scope, ...]:
        return tuple(scope for scope in SCOPE_ORDER if scope is not self)


SCOPE_ORDER: tuple[Scope, ...] = (Scope.PUBLIC, Scope.PRIVATE)
"""Order in which scopes are checked when no scope is selected."""


class ConformanceState(Enum):
    """Lifecycle of a single conformance request."""

    DECLARED = "declared"
    DEFINING = "defining"
    CHECKED_PASS = "checked_pass"
    CHECKED_FAIL = "checked_fail"

    @property
    def is_terminal(self) -> bool:
        return self in (ConformanceState.CHECKED_PASS, ConformanceState.CHECKED_FAIL)


@dataclass(slots=True)
class BehaviorDeclaration:
    """Requirements and defaults a provider has declared.

    Requirement sets are dicts used as insertion-ordered sets, so diagnostics
    list names in the order they were declared.
    """

    public_requirements: dict[str, None] = field(default_factory=dict)
    private_requirements: dict[str, None] = field(default_factory=dict)
    default_block: DefinitionBlock | None = None

    def requirements(self, scope: Scope) -> dict[str, None]:
        if scope is Scope.PUBLIC:
            return self.public_requirements
        return self.private_requirements

    def add(self, names: tuple[str, ...], scope: Scope) -> None:
        self.requirements(scope).update(dict.fromkeys(names))


@dataclass(slots=True)
class ConformanceRequest:
    """A conformer asking to behave like a provider."""

    provider: type
    conformer: type
    block: DefinitionBlock | None = None
    state: ConformanceState = ConformanceState.DECLARED

    @property
    def is_immediate(self) -> bool:
        return self.block is not None

    def describe(self) -> str:
        return f"{self.conformer.__name__} -> {self.provider.__name__}"


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """Result of checking one (provider, conformer, scope) triple."""

    provider: type
    conformer: type
    scope: Scope
    required: tuple[str, ...]
    implemented: frozenset[str]
    unimplemented: tuple[str, ...]
    cross_scope_hits: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.unimplemented

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider.__name__,
            "conformer": self.conformer.__name__,
            "scope": self.scope.value,
            "passed": self.passed,
            "required": list(self.required),
            "unimplemented": list(self.unimplemented),
            "wrong_scope": list(self.cross_scope_hits),
        }
