"""Behaviors - declare, inject and verify behavioral contracts.

Usage:
    from behaves import behaves_like, implements, inject_behaviors

    @implements("speak", "move")
    @implements("breathe", private=True)
    class Animal:
        pass

    @behaves_like(Animal)
    class Dog:
        def speak(self): ...
        def move(self): ...
        def _breathe(self): ...

Without an inline block, ``behaves_like`` only injects defaults and queues the
check. Queued checks run at ``finalize()``, or at interpreter exit when the
exit hook is enabled. With an inline block, the block's definitions are
applied and the check runs on the spot.
"""

from __future__ import annotations

import atexit
import logging
import threading
from collections.abc import Callable, Iterable
from typing import TypeVar

from behaves.checker import check as check_scope
from behaves.checker import check_all, compute_outcome
from behaves.errors import BehavesError, NoDeclarationError
from behaves.injection import evaluate_block, inject
from behaves.introspection import require_class
from behaves.registry import DeclarationRegistry
from behaves.types import (
    SCOPE_ORDER,
    ConformanceRequest,
    ConformanceState,
    DefinitionBlock,
    Scope,
    VerificationOutcome,
)

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


class Behaviors:
    """Declaration registry, injector and verification trigger in one place.

    Args:
        exit_hook: Run ``finalize`` at interpreter exit. None defers to the
            ``exit_hook`` config setting, read when the first check is queued.
        registry: Declaration registry to use (a fresh one by default).
    """

    def __init__(
        self,
        *,
        exit_hook: bool | None = None,
        registry: DeclarationRegistry | None = None,
    ):
        self.registry = registry or DeclarationRegistry()
        self._exit_hook = exit_hook
        self._hook_installed = False
        self._pending: list[ConformanceRequest] = []
        self.failures: list[BehavesError] = []
        """Every failure seen at a checkpoint, across all finalize() calls."""

    # =========================================================================
    # Declaration
    # =========================================================================

    def declare(self, provider: type, names: Iterable[str], scope: Scope = Scope.PUBLIC) -> None:
        self.registry.declare(provider, names, scope)

    def declare_defaults(self, provider: type, block: DefinitionBlock) -> bool:
        return self.registry.declare_defaults(provider, block)

    def requirements_for(self, provider: type, scope: Scope) -> tuple[str, ...]:
        return self.registry.requirements_for(provider, scope)

    def implements(self, *names: str, private: bool = False) -> Callable[[C], C]:
        """Class decorator declaring required operations on a provider."""
        scope = Scope.PRIVATE if private else Scope.PUBLIC

        def decorator(provider: C) -> C:
            self.declare(provider, names, scope)
            return provider

        return decorator

    def inject_behaviors(self, block: DefinitionBlock) -> Callable[[C], C]:
        """Class decorator storing a provider's default block."""

        def decorator(provider: C) -> C:
            self.declare_defaults(provider, block)
            return provider

        return decorator

    # =========================================================================
    # Conformance
    # =========================================================================

    def behaves_like(self, provider: type, block: DefinitionBlock | None = None) -> Callable[[C], C]:
        """Class decorator asserting that the decorated class conforms to ``provider``."""

        def decorator(conformer: C) -> C:
            self.request(conformer, provider, block)
            return conformer

        return decorator

    def request(
        self,
        conformer: type,
        provider: type,
        block: DefinitionBlock | None = None,
    ) -> ConformanceRequest:
        """Ask for ``conformer`` to behave like ``provider``.

        Raises:
            ConformanceError: With an inline block, if the conformer does not conform.
            NoDeclarationError: With an inline block, if the provider declared nothing.
        """
        req = ConformanceRequest(
            provider=require_class(provider),
            conformer=require_class(conformer),
            block=block,
        )
        inject(self.registry, provider, conformer)
        req.state = ConformanceState.DEFINING

        if block is None:
            self._pending.append(req)
            self._ensure_exit_hook()
            logger.debug("Queued conformance check %s", req.describe())
            return req

        evaluate_block(block, provider, conformer)
        self._run(req)
        return req

    def check(
        self,
        provider: type,
        conformer: type,
        scope: Scope | None = None,
    ) -> list[VerificationOutcome]:
        """Check a conformer right now, for one scope or for all of them.

        Does not touch queued requests.
        """
        if scope is None:
            return check_all(self.registry, provider, conformer)
        return [check_scope(self.registry, provider, conformer, scope)]

    def outcomes(self, provider: type, conformer: type) -> list[VerificationOutcome]:
        """Outcomes for every scope, without raising on missing operations."""
        return [compute_outcome(self.registry, provider, conformer, scope) for scope in SCOPE_ORDER]

    @property
    def pending(self) -> tuple[ConformanceRequest, ...]:
        return tuple(self._pending)

    def _run(self, req: ConformanceRequest) -> None:
        try:
            check_all(self.registry, req.provider, req.conformer)
        except BehavesError:
            req.state = ConformanceState.CHECKED_FAIL
            raise
        req.state = ConformanceState.CHECKED_PASS

    def _run_every_scope(self, req: ConformanceRequest) -> list[BehavesError]:
        """Check each scope in turn and collect failures instead of stopping at the first."""
        errors: list[BehavesError] = []
        for scope in SCOPE_ORDER:
            try:
                check_scope(self.registry, req.provider, req.conformer, scope)
            except NoDeclarationError as e:
                # Same for every scope
                errors.append(e)
                break
            except BehavesError as e:
                errors.append(e)
        req.state = ConformanceState.CHECKED_FAIL if errors else ConformanceState.CHECKED_PASS
        return errors

    # =========================================================================
    # Deferred checkpoint
    # =========================================================================

    def finalize(self, *, raise_errors: bool = True) -> list[BehavesError]:
        """Run every queued check that has not run yet.

        Every check is attempted even after one fails, and both scopes of a
        request are checked even when the first one fails. Failures are
        logged and appended to ``failures``.

        Args:
            raise_errors: Re-raise the first failure once all checks ran.

        Returns:
            Failures found by this call, in queue order.
        """
        pending, self._pending = self._pending, []
        found: list[BehavesError] = []

        for req in pending:
            if req.state.is_terminal:
                continue
            for error in self._run_every_scope(req):
                logger.error("%s", error)
                found.append(error)

        logger.debug("Checkpoint ran %d check(s), %d failure(s)", len(pending), len(found))
        self.failures.extend(found)
        if found and raise_errors:
            raise found[0]
        return found

    def _ensure_exit_hook(self) -> None:
        if self._hook_installed:
            return
        enabled = self._exit_hook
        if enabled is None:
            from behaves.config import get_config

            enabled = get_config().exit_hook
        if enabled:
            atexit.register(self._at_exit)
            self._hook_installed = True
            logger.debug("Registered exit hook")

    def _at_exit(self) -> None:
        failures = self.finalize(raise_errors=False)
        if not failures:
            return
        from behaves.config import get_config
        from behaves.report import emit_failures

        emit_failures(failures, get_config().report_format)

    def close(self) -> None:
        """Detach the exit hook; queued checks are dropped."""
        if self._hook_installed:
            atexit.unregister(self._at_exit)
            self._hook_installed = False
        self._pending.clear()


# Process-wide default instance (lazy-loaded, thread-safe)
_behaviors: Behaviors | None = None
_behaviors_lock = threading.Lock()


def get_behaviors() -> Behaviors:
    """Get the process-wide Behaviors instance, creating it if needed."""
    global _behaviors

    if _behaviors is not None:
        return _behaviors

    with _behaviors_lock:
        if _behaviors is None:
            _behaviors = Behaviors()
        return _behaviors


def reset_behaviors() -> None:
    """Drop the process-wide instance and its queued checks (useful for testing)."""
    global _behaviors
    with _behaviors_lock:
        if _behaviors is not None:
            _behaviors.close()
        _behaviors = None


def implements(*names: str, private: bool = False) -> Callable[[C], C]:
    return get_behaviors().implements(*names, private=private)


def inject_behaviors(block: DefinitionBlock) -> Callable[[C], C]:
    return get_behaviors().inject_behaviors(block)


def behaves_like(provider: type, block: DefinitionBlock | None = None) -> Callable[[C], C]:
    return get_behaviors().behaves_like(provider, block)


def check(provider: type, conformer: type, scope: Scope | None = None) -> list[VerificationOutcome]:
    return get_behaviors().check(provider, conformer, scope)


def finalize(*, raise_errors: bool = True) -> list[BehavesError]:
    return get_behaviors().finalize(raise_errors=raise_errors)
