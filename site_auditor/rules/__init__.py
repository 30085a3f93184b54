# site_auditor/rules/__init__.py
"""
Rule catalog, one module per category.

Every catalog module exposes a `RULES` tuple. `build_default_registry` walks
CATALOG_MODULES in order and registers each tuple in order, so the registry
content and order are the same in every process.
"""
from __future__ import annotations

import logging
from types import ModuleType
from typing import Sequence

from site_auditor.registry import RuleRegistry
from site_auditor.rules import (
    a11y,
    content,
    core,
    crawl,
    eeat,
    i18n,
    images,
    legal,
    links,
    mobile,
    perf,
    schema,
    security,
    social,
    technical,
    url,
)

log = logging.getLogger(__name__)

# Same order as the category catalog.
CATALOG_MODULES: tuple[ModuleType, ...] = (
    core,
    technical,
    perf,
    links,
    images,
    security,
    crawl,
    schema,
    a11y,
    content,
    social,
    eeat,
    url,
    mobile,
    i18n,
    legal,
)


def build_default_registry(modules: Sequence[ModuleType] = CATALOG_MODULES) -> RuleRegistry:
    """Create a fresh registry holding every catalog rule."""
    registry = RuleRegistry()
    for module in modules:
        registry.register_all(module.RULES)
    log.debug("Built default registry with %d rules", len(registry))
    return registry


__all__ = ["CATALOG_MODULES", "build_default_registry"]
