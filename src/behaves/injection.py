"""Default-behavior injection.

A provider's default block is a callable taking a ``DefinitionContext``. The
context is the only handle the block gets on the conformer, and it limits what
the block can do to three things: define an operation, include a mixin's
operations, and extend the conformer with a mixin's class-level methods.

Example:
    >>> def animal_defaults(ctx):
    ...     @ctx.define
    ...     def greet(self):
    ...         return "hello"
    ...
    ...     @ctx.define(private=True)
    ...     def sleep(self):
    ...         return "zzz"
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from behaves.introspection import (
    attribute_name,
    define_operation,
    is_dunder,
    normalize_token,
    owned_operations,
    owns_attribute,
    require_class,
    split_name,
)
from behaves.types import SCOPE_ORDER, Scope

if TYPE_CHECKING:
    from behaves.registry import DeclarationRegistry

logger = logging.getLogger(__name__)


class DefinitionContext:
    """Definitions a block may perform on one conformer.

    With ``preserve_existing`` set, operations the conformer already owns when
    the context is created are left alone. Defaults are injected this way: the
    conformer's own definitions count as coming later, so they win.
    """

    def __init__(
        self,
        conformer: type,
        *,
        provider: type | None = None,
        preserve_existing: bool = False,
    ):
        self._conformer = require_class(conformer)
        self._provider = provider
        self._preserved: dict[Scope, frozenset[str]] = {scope: frozenset() for scope in SCOPE_ORDER}
        if preserve_existing:
            self._preserved = {
                scope: frozenset(tokens)
                for scope, tokens in owned_operations(conformer).items()
            }
        self.defined: list[str] = []
        """Attribute names this context attached, in order."""

    @property
    def conformer(self) -> type:
        return self._conformer

    @property
    def provider(self) -> type | None:
        return self._provider

    def define(
        self,
        fn: Callable[..., Any] | None = None,
        *,
        name: str | None = None,
        private: bool = False,
    ) -> Any:
        """Define an operation on the conformer.

        Works as a bare decorator, as a decorator with arguments, or as a
        plain call. A function whose name starts with an underscore is private
        even without ``private=True``.
        """

        def register(impl: Any) -> Any:
            raw = name or getattr(impl, "__name__", None)
            if raw is None:
                raise TypeError(f"cannot infer an operation name for {impl!r}, pass name=")
            token, scope = split_name(self._conformer, raw)
            if private:
                scope = Scope.PRIVATE
            self._attach(normalize_token(token, scope), scope, impl)
            return impl

        if fn is None:
            return register
        return register(fn)

    def include(self, mixin: type) -> None:
        """Copy every operation ``mixin`` defines itself, keeping its visibility.

        A name-mangled private method (``__secret`` on ``Greeter``) is attached
        as ``_secret`` and also under its mangled name ``_Greeter__secret``,
        which is what the mixin's own ``self.__secret()`` calls look up.
        """
        require_class(mixin)
        namespace = vars(mixin)
        for scope, tokens in owned_operations(mixin).items():
            for token, attr in tokens.items():
                implementation = namespace[attr]
                self._attach(token, scope, implementation)
                if attr != attribute_name(token, scope) and not owns_attribute(self._conformer, attr):
                    setattr(self._conformer, attr, implementation)
                    self.defined.append(attr)

    def extend(self, mixin: type) -> None:
        """Attach ``mixin``'s operations as class-level methods on the conformer.

        Dunder methods such as ``__init__`` are skipped.
        """
        require_class(mixin)
        namespace = vars(mixin)
        for scope, tokens in owned_operations(mixin).items():
            for token, attr in tokens.items():
                if is_dunder(attr):
                    continue
                value = namespace[attr]
                if not isinstance(value, (staticmethod, classmethod, property)):
                    value = classmethod(value)
                self._attach(token, scope, value)

    def _attach(self, token: str, scope: Scope, implementation: Any) -> None:
        if token in self._preserved[scope]:
            logger.debug(
                "%s keeps its own %s %s",
                self._conformer.__qualname__,
                scope.value,
                attribute_name(token, scope),
            )
            return
        attr = define_operation(self._conformer, token, scope, implementation)
        self.defined.append(attr)


def inject(registry: DeclarationRegistry, provider: type, conformer: type) -> DefinitionContext | None:
    """Apply the provider's default block to ``conformer``.

    Returns the context used, or None when the provider has no defaults.
    Injecting twice leaves the conformer in the same state as injecting once.
    """
    block = registry.defaults_for(provider)
    if block is None:
        return None
    ctx = DefinitionContext(conformer, provider=provider, preserve_existing=True)
    block(ctx)
    logger.debug(
        "Injected %s defaults into %s: %s",
        provider.__qualname__,
        conformer.__qualname__,
        ctx.defined,
    )
    return ctx


def evaluate_block(block: Callable[[DefinitionContext], Any], provider: type, conformer: type) -> DefinitionContext:
    """Evaluate an inline definition block; its definitions replace defaults."""
    ctx = DefinitionContext(conformer, provider=provider)
    block(ctx)
    return ctx
