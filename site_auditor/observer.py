# site_auditor/observer.py
"""
Progress notifications.

The pipeline and the auditor report lifecycle events to an observer. An
observer can ignore any event; whatever it does (including raising) never
changes results. `notify` is the single dispatch point that enforces that.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from site_auditor.models import (
    AuditRule,
    CategoryDefinition,
    CategoryResult,
    RuleResult,
)

log = logging.getLogger(__name__)


class AuditObserver:
    """No-op base. Subclass and override only the events you care about."""

    def on_category_start(self, category: CategoryDefinition, page_url: str) -> None:
        pass

    def on_rule_complete(self, rule: AuditRule, result: RuleResult) -> None:
        pass

    def on_category_complete(
        self, category: CategoryDefinition, result: CategoryResult
    ) -> None:
        pass

    def on_page_complete(
        self,
        url: str,
        page_number: int,
        total_pages: int,
        error: Optional[str] = None,
    ) -> None:
        pass


class LoggingObserver(AuditObserver):
    """Writes every event to the log. Used by the CLI in verbose mode."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or log

    def on_category_start(self, category: CategoryDefinition, page_url: str) -> None:
        self.log.info("[%s] %s ...", page_url, category.name)

    def on_rule_complete(self, rule: AuditRule, result: RuleResult) -> None:
        self.log.debug(
            "  %-6s %s (%d): %s",
            result.status.upper(),
            rule.id,
            result.score,
            result.message,
        )

    def on_category_complete(
        self, category: CategoryDefinition, result: CategoryResult
    ) -> None:
        self.log.info(
            "%s: %d (pass=%d warn=%d fail=%d)",
            category.name,
            result.score,
            result.pass_count,
            result.warn_count,
            result.fail_count,
        )

    def on_page_complete(
        self,
        url: str,
        page_number: int,
        total_pages: int,
        error: Optional[str] = None,
    ) -> None:
        if error:
            self.log.warning("Page %d/%d skipped: %s (%s)", page_number, total_pages, url, error)
        else:
            self.log.info("Page %d/%d audited: %s", page_number, total_pages, url)


def notify(observer: AuditObserver | None, event: str, *args: Any, **kwargs: Any) -> None:
    """Fire-and-forget call of `observer.<event>(...)`; failures are logged only."""
    if observer is None:
        return
    handler = getattr(observer, event, None)
    if handler is None:
        return
    try:
        handler(*args, **kwargs)
    except Exception as e:
        log.warning("Observer %s.%s raised %r; ignoring", type(observer).__name__, event, e)
