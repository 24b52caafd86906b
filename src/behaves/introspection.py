"""Class reflection helpers.

Visibility in Python lives in the name, so an operation is reduced to a
*token* (its name without the private marker) plus a ``Scope``:

    ``greet``      -> ("greet", PUBLIC)
    ``_greet``     -> ("greet", PRIVATE)
    ``_Dog__greet`` on ``Dog`` -> ("greet", PRIVATE)
    ``__len__``    -> ("__len__", PUBLIC)

Only entries in the class's own ``__dict__`` are considered. Anything the
interpreter puts on every class is ignored.
"""

from __future__ import annotations

from typing import Any

from behaves.errors import entity_error, name_error
from behaves.types import SCOPE_ORDER, Scope

# Attributes every class body gets from the interpreter, never operations.
_CLASS_ATTRIBUTES = frozenset({
    "__annotate__",
    "__annotate_func__",
    "__annotations__",
    "__annotations_cache__",
    "__classcell__",
    "__dict__",
    "__doc__",
    "__firstlineno__",
    "__module__",
    "__orig_bases__",
    "__parameters__",
    "__qualname__",
    "__slots__",
    "__static_attributes__",
    "__type_params__",
    "__weakref__",
})

_DESCRIPTOR_TYPES = (staticmethod, classmethod, property)


def require_class(entity: Any) -> type:
    """Return ``entity`` if it is a class, raise INVALID_ENTITY otherwise."""
    if not isinstance(entity, type):
        raise entity_error(entity)
    return entity


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def split_name(owner: type, name: str) -> tuple[str, Scope]:
    """Split an attribute name on ``owner`` into (token, scope)."""
    if is_dunder(name) or not name.startswith("_"):
        return name, Scope.PUBLIC
    mangled = f"_{owner.__name__.lstrip('_')}__"
    if name.startswith(mangled) and len(name) > len(mangled):
        return name[len(mangled):], Scope.PRIVATE
    return name.lstrip("_"), Scope.PRIVATE


def attribute_name(token: str, scope: Scope) -> str:
    """Attribute name under which ``token`` is defined for ``scope``."""
    if scope is Scope.PRIVATE:
        return f"_{token}"
    return token


def normalize_token(name: Any, scope: Scope) -> str:
    """Validate a declared requirement name and reduce it to its token.

    Private names may be given with or without the leading underscore.
    """
    if not isinstance(name, str) or not name.lstrip("_").isidentifier():
        raise name_error(name, scope, "not an identifier")
    if scope is Scope.PUBLIC:
        if name.startswith("_") and not is_dunder(name):
            raise name_error(name, scope, "public names cannot start with an underscore")
        return name
    if is_dunder(name):
        raise name_error(name, scope, "dunder methods are always public")
    return name.lstrip("_")


def is_operation(value: Any) -> bool:
    """Whether a class ``__dict__`` value counts as an operation."""
    if isinstance(value, _DESCRIPTOR_TYPES):
        return True
    return callable(value) and not isinstance(value, type)


def owned_operations(entity: type) -> dict[Scope, dict[str, str]]:
    """Map each scope to {token: attribute name} for operations ``entity`` defines itself."""
    found: dict[Scope, dict[str, str]] = {scope: {} for scope in SCOPE_ORDER}
    for name, value in vars(entity).items():
        if name in _CLASS_ATTRIBUTES or not is_operation(value):
            continue
        token, scope = split_name(entity, name)
        found[scope].setdefault(token, name)
    return found


def directly_owned_operations(entity: type, scope: Scope) -> frozenset[str]:
    """Tokens of the operations ``entity`` defines itself in ``scope``."""
    return frozenset(owned_operations(require_class(entity))[scope])


def owns_attribute(entity: type, name: str) -> bool:
    return name in vars(entity)


def define_operation(entity: type, token: str, scope: Scope, implementation: Any) -> str:
    """Attach ``implementation`` to ``entity`` as ``token`` in ``scope``.

    Returns the attribute name used.
    """
    name = attribute_name(token, scope)
    setattr(entity, name, implementation)
    return name
