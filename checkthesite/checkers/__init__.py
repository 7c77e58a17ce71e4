"""Site checkers — contract, registry and built-in implementations."""

from checkthesite.checkers.base import (
    NO_CONFIG,
    CheckerConfig,
    CheckerConfigInfo,
    CheckerHandle,
    Configured,
    NoConfig,
    SiteChecker,
    SiteCheckError,
)
from checkthesite.checkers.registry import (
    CheckerResolutionError,
    available_checkers,
    register_checker,
    resolve_checker,
)
from checkthesite.checkers import simple_contains  # noqa: F401  (registers built-in)

__all__ = [
    "NO_CONFIG",
    "CheckerConfig",
    "CheckerConfigInfo",
    "CheckerHandle",
    "CheckerResolutionError",
    "Configured",
    "NoConfig",
    "SiteChecker",
    "SiteCheckError",
    "available_checkers",
    "register_checker",
    "resolve_checker",
]
