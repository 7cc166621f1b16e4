"""Known checks and the default registry built from them."""

from functools import lru_cache

from qt_lazy_linter.domain.registry import CheckDescriptor, CheckRegistry
from qt_lazy_linter.use_cases.checks import (
    ctor_missing_parent_argument,
    qdatetime_utc,
    qt4_qstring_from_array,
)

# Registration order is dispatch order.
KNOWN_CHECKS: tuple[CheckDescriptor, ...] = (
    ctor_missing_parent_argument.DESCRIPTOR,
    qdatetime_utc.DESCRIPTOR,
    qt4_qstring_from_array.DESCRIPTOR,
)


def build_default_registry() -> CheckRegistry:
    """A fresh registry holding every known check."""
    registry = CheckRegistry()
    for descriptor in KNOWN_CHECKS:
        registry.register(descriptor)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> CheckRegistry:
    """Process-wide registry, built on first use."""
    return build_default_registry()
