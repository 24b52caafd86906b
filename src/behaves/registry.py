"""DeclarationRegistry - side table of provider behavior declarations.

Declarations are keyed by the provider class in a ``WeakKeyDictionary``, so
providers never get extra attributes and classes created in tests can be
garbage collected.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterable

from behaves.errors import BehavesError, ErrorCode, NoDeclarationError
from behaves.introspection import normalize_token, require_class
from behaves.types import BehaviorDeclaration, DefinitionBlock, Scope

logger = logging.getLogger(__name__)


class DeclarationRegistry:
    """Stores each provider's required operations and default block."""

    def __init__(self) -> None:
        self._declarations: weakref.WeakKeyDictionary[type, BehaviorDeclaration] = (
            weakref.WeakKeyDictionary()
        )
        # Providers that have called declare() at least once.
        self._declared: weakref.WeakSet[type] = weakref.WeakSet()

    def _entry(self, provider: type) -> BehaviorDeclaration:
        entry = self._declarations.get(provider)
        if entry is None:
            entry = BehaviorDeclaration()
            self._declarations[provider] = entry
        return entry

    def declare(self, provider: type, names: Iterable[str], scope: Scope = Scope.PUBLIC) -> None:
        """Add ``names`` to the provider's requirements for ``scope``.

        Repeated calls union into the existing set.
        """
        require_class(provider)
        if isinstance(names, str):
            names = (names,)
        tokens = tuple(normalize_token(name, scope) for name in names)
        self._entry(provider).add(tokens, scope)
        self._declared.add(provider)
        logger.debug("%s requires %s %s", provider.__qualname__, scope.value, list(tokens))

    def declare_defaults(self, provider: type, block: DefinitionBlock) -> bool:
        """Store the provider's default block. Only the first call takes effect.

        Returns:
            True if the block was stored, False if one was already present.
        """
        require_class(provider)
        if not callable(block):
            raise BehavesError(
                code=ErrorCode.INVALID_DEFAULT_BLOCK,
                context={"provider": provider.__name__, "detail": type(block).__name__},
            )
        entry = self._entry(provider)
        if entry.default_block is not None:
            logger.debug("%s already has default behaviors, ignoring", provider.__qualname__)
            return False
        entry.default_block = block
        logger.debug("%s stores default behaviors %r", provider.__qualname__, block)
        return True

    def has_declaration(self, provider: type) -> bool:
        return provider in self._declared

    def requirements_for(self, provider: type, scope: Scope) -> tuple[str, ...]:
        """Declared requirements for ``scope``, in declaration order.

        Raises:
            NoDeclarationError: If the provider never declared any requirement.
        """
        if not self.has_declaration(provider):
            raise NoDeclarationError(provider, scope)
        return tuple(self._declarations[provider].requirements(scope))

    def defaults_for(self, provider: type) -> DefinitionBlock | None:
        entry = self._declarations.get(provider)
        return entry.default_block if entry is not None else None
