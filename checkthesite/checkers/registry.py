"""Checker registry — resolves a checker implementation by identifier.

Built-in checkers register under a short name. Anything else can be loaded
from an import path, either ``package.module:ClassName`` or
``package.module.ClassName``; the class must subclass ``SiteChecker`` and
take no constructor arguments.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import TypeVar

from checkthesite.checkers.base import SiteChecker

logger = logging.getLogger(__name__)

CheckerFactory = Callable[[], SiteChecker]
_T = TypeVar("_T", bound=type[SiteChecker])

_REGISTRY: dict[str, CheckerFactory] = {}


class CheckerResolutionError(Exception):
    """Raised when a checker identifier cannot be turned into a checker."""


def register_checker(name: str) -> Callable[[_T], _T]:
    """Class decorator registering a checker under ``name``."""

    def decorator(cls: _T) -> _T:
        key = name.strip().lower()
        if key in _REGISTRY:
            logger.warning("Checker %r registered twice, replacing previous entry", key)
        _REGISTRY[key] = cls
        return cls

    return decorator


def available_checkers() -> list[str]:
    return sorted(_REGISTRY)


def _import_class(path: str) -> type:
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise CheckerResolutionError(f"Unknown site checker {path!r}")

    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise CheckerResolutionError(f"Couldn't import module {module_name!r}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError:
        raise CheckerResolutionError(f"Couldn't find site checker class {path!r}") from None


def resolve_checker(identifier: str) -> SiteChecker:
    """Return a fresh checker for ``identifier`` (registry name or import path)."""
    ident = identifier.strip()
    if not ident:
        raise CheckerResolutionError("Site checker identifier is empty")

    factory = _REGISTRY.get(ident.lower())
    if factory is None:
        cls = _import_class(ident)
        if not (isinstance(cls, type) and issubclass(cls, SiteChecker)):
            raise CheckerResolutionError(f"{ident} doesn't implement the SiteChecker interface")
        factory = cls

    try:
        checker = factory()
    except TypeError as e:
        raise CheckerResolutionError(
            f"Couldn't instantiate {ident}. Does it have a no-arg constructor? ({e})"
        ) from e
    except Exception as e:
        raise CheckerResolutionError(f"Couldn't instantiate {ident}: {e}") from e
    logger.info("Resolved site checker %s as %s", ident, checker.name)
    return checker
