"""behaves - runtime behavioral contracts for Python classes.

A provider class declares the operations it requires; a conformer class
asserts that it behaves like the provider. Defaults supplied by the provider
are injected into the conformer, and conformance is verified either on the
spot or at a deferred checkpoint.
"""

__version__ = "0.3.0"

# Facade and module-level entry points
from behaves.behaviors import (
    Behaviors,
    behaves_like,
    check,
    finalize,
    get_behaviors,
    implements,
    inject_behaviors,
    reset_behaviors,
)

# Errors
from behaves.errors import (
    BehavesError,
    ConformanceError,
    ErrorCode,
    NoDeclarationError,
)

# Building blocks
from behaves.injection import DefinitionContext
from behaves.registry import DeclarationRegistry
from behaves.types import (
    BehaviorDeclaration,
    ConformanceRequest,
    ConformanceState,
    Scope,
    VerificationOutcome,
)

__all__ = [
    # === Entry points ===
    "Behaviors",
    "behaves_like",
    "check",
    "finalize",
    "get_behaviors",
    "implements",
    "inject_behaviors",
    "reset_behaviors",
    # === Errors ===
    "BehavesError",
    "ConformanceError",
    "ErrorCode",
    "NoDeclarationError",
    # === Types ===
    "BehaviorDeclaration",
    "ConformanceRequest",
    "ConformanceState",
    "DeclarationRegistry",
    "DefinitionContext",
    "Scope",
    "VerificationOutcome",
    # === Meta ===
    "__version__",
]
