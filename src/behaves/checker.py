"""Conformance checking.

One code path serves both the immediate and the deferred trigger, as well as
direct calls from tests, so equal conformer states give equal results.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from behaves.errors import ConformanceError
from behaves.introspection import owned_operations, require_class
from behaves.registry import DeclarationRegistry
from behaves.types import SCOPE_ORDER, Scope, VerificationOutcome

logger = logging.getLogger(__name__)


def compute_outcome(
    registry: DeclarationRegistry,
    provider: type,
    conformer: type,
    scope: Scope,
) -> VerificationOutcome:
    """Compute the outcome for one scope without raising on missing operations.

    Raises:
        NoDeclarationError: If the provider never declared requirements.
    """
    required = registry.requirements_for(provider, scope)
    owned = owned_operations(require_class(conformer))
    implemented = frozenset(owned[scope])
    unimplemented = tuple(name for name in required if name not in implemented)

    cross_scope_hits: tuple[str, ...] = ()
    if unimplemented:
        elsewhere = set().union(*(owned[other] for other in scope.others))
        cross_scope_hits = tuple(name for name in unimplemented if name in elsewhere)

    return VerificationOutcome(
        provider=provider,
        conformer=conformer,
        scope=scope,
        required=required,
        implemented=implemented,
        unimplemented=unimplemented,
        cross_scope_hits=cross_scope_hits,
    )


def check(
    registry: DeclarationRegistry,
    provider: type,
    conformer: type,
    scope: Scope,
) -> VerificationOutcome:
    """Check one scope, raising ConformanceError if anything is missing."""
    outcome = compute_outcome(registry, provider, conformer, scope)
    if outcome.passed:
        logger.debug(
            "%s behaves like %s (%s)",
            conformer.__qualname__,
            provider.__qualname__,
            scope.value,
        )
        return outcome
    raise ConformanceError(
        conformer=conformer,
        provider=provider,
        scope=scope,
        unimplemented=outcome.unimplemented,
        wrong_scope=outcome.cross_scope_hits,
    )


def check_all(
    registry: DeclarationRegistry,
    provider: type,
    conformer: type,
    scopes: Iterable[Scope] = SCOPE_ORDER,
) -> list[VerificationOutcome]:
    """Check each scope in order; the first failing scope raises."""
    return [check(registry, provider, conformer, scope) for scope in scopes]
