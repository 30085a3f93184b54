# site_auditor/config.py
"""
Centralized configuration management.

Handles loading defaults, merging in settings from pyproject.toml,
and applying runtime overrides.
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, MutableMapping, Sequence

import tomli

from site_auditor.categories import DEFAULT_CATEGORIES, with_weight_overrides
from site_auditor.fetcher import DEFAULT_USER_AGENT
from site_auditor.models import CategoryDefinition

log = logging.getLogger(__name__)

# This is the baseline configuration dictionary.
DEFAULT_CONFIG: dict[str, Any] = {
    "timeout": 30.0,  # seconds, per fetch
    "rule_timeout": 10.0,  # seconds, per async rule
    "max_pages": 10,
    "concurrency": 3,
    "crawl_timeout": None,  # seconds for the whole crawl; None = page cap only
    "max_redirects": 5,
    "user_agent": DEFAULT_USER_AGENT,
    "use_registrable_domain": False,  # crawl subdomains of the seed's eTLD+1 too
    "exclude": [],  # fnmatch patterns on host / host+path never crawled
    "pass_threshold": 70,  # CLI exit code 0 at or above this overall score
    # --- Category selection & weights ---
    "categories": [],  # empty = all
    "category_weights": {},  # id -> weight override; totals must stay 100
}


def _deep_merge_dict(
    base: MutableMapping[str, Any], overrides: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Recursively merge dicts."""
    for key, value in overrides.items():
        if isinstance(value, MutableMapping) and isinstance(
            base.get(key), MutableMapping
        ):
            base[key] = _deep_merge_dict(base[key], value)
        else:
            base[key] = value
    return base


def load_config(pyproject_path: Path | None = None) -> dict[str, Any]:
    """
    Loads configuration from defaults and merges settings from pyproject.toml.

    1. Starts with DEFAULT_CONFIG.
    2. Looks for `pyproject.toml` (default: current directory).
    3. If found, merges settings from `[tool.site_auditor]` over the defaults.

    A missing or unreadable file is not an error; defaults are used.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if pyproject_path is None:
        pyproject_path = Path.cwd() / "pyproject.toml"

    if not pyproject_path.exists():
        log.debug("No pyproject.toml found at %s. Using default config.", pyproject_path)
        return config

    try:
        with pyproject_path.open("rb") as f:
            toml_data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        log.warning(
            "Failed to load or parse %s: %s. Using default config.",
            pyproject_path,
            e,
            exc_info=True,
        )
        return config

    project_config = toml_data.get("tool", {}).get("site_auditor", {})
    if project_config:
        log.info("Loading config from %s", pyproject_path)
        config = _deep_merge_dict(config, project_config)  # type: ignore
    else:
        log.debug("No [tool.site_auditor] section in %s.", pyproject_path)

    return config


def categories_from_config(
    config: dict[str, Any],
    base: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
) -> list[CategoryDefinition]:
    """
    The category catalog with `category_weights` applied.

    Raises ConfigurationError if the resulting weights do not sum to 100.
    """
    return with_weight_overrides(base, config.get("category_weights") or {})
