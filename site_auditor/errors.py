# Exception hierarchy for the audit engine.

from __future__ import annotations


class AuditError(Exception):
    """Base class for every error raised by site_auditor."""


class ConfigurationError(AuditError):
    """Invalid setup detected before any audit runs (bad weights, unknown ids)."""


class DuplicateRuleError(ConfigurationError):
    """A rule id was registered twice."""

    def __init__(self, rule_id: str):
        super().__init__(f"Rule id already registered: {rule_id}")
        self.rule_id = rule_id


class FetchError(AuditError):
    """A page could not be fetched (network failure, timeout, unsupported URL)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
