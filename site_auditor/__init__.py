# Entrypoint for the site_auditor package.
# This file makes the public API available to programmers.

from __future__ import annotations

from site_auditor.__about__ import __version__
from site_auditor.api import audit, audit_site
from site_auditor.auditor import Auditor
from site_auditor.errors import AuditError, ConfigurationError, DuplicateRuleError, FetchError
from site_auditor.models import (
    AuditContext,
    AuditResult,
    AuditRule,
    CategoryDefinition,
    CategoryResult,
    CrawledPage,
    RuleResult,
)
from site_auditor.registry import RuleRegistry

# The __all__ variable defines the public API of the package.
# When a user writes `from site_auditor import *`, only these names will be imported.
__all__ = [
    "audit",
    "audit_site",
    "Auditor",
    "AuditContext",
    "AuditError",
    "AuditResult",
    "AuditRule",
    "CategoryDefinition",
    "CategoryResult",
    "ConfigurationError",
    "CrawledPage",
    "DuplicateRuleError",
    "FetchError",
    "RuleRegistry",
    "RuleResult",
    "__version__",
]
