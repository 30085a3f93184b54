# site_auditor/registry.py
"""
Rule registry.

Holds the rule catalog, indexed by category and by id. Registration order is
preserved per category so result lists are reproducible run to run.

There is no module-level registry: callers own an instance (normally built by
`site_auditor.rules.build_default_registry`), so tests and concurrent auditors
never share state.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from site_auditor.errors import DuplicateRuleError
from site_auditor.models import AuditRule

log = logging.getLogger(__name__)


class RuleRegistry:
    def __init__(self, rules: Iterable[AuditRule] | None = None):
        self._by_id: Dict[str, AuditRule] = {}
        self._by_category: Dict[str, List[AuditRule]] = {}
        if rules:
            self.register_all(rules)

    def register(self, rule: AuditRule) -> None:
        """Add a rule under its category. Duplicate ids are a configuration error."""
        if rule.id in self._by_id:
            raise DuplicateRuleError(rule.id)
        self._by_id[rule.id] = rule
        self._by_category.setdefault(rule.category, []).append(rule)
        log.debug("Registered rule %s in category %s", rule.id, rule.category)

    def register_all(self, rules: Iterable[AuditRule]) -> None:
        for rule in rules:
            self.register(rule)

    def rules_by_category(self, category_id: str) -> list[AuditRule]:
        # Copy so callers cannot reorder the registry.
        return list(self._by_category.get(category_id, []))

    def rule_by_id(self, rule_id: str) -> AuditRule | None:
        return self._by_id.get(rule_id)

    def all_rules(self) -> list[AuditRule]:
        return list(self._by_id.values())

    def categories(self) -> list[str]:
        """Category ids that have at least one rule, in first-registration order."""
        return list(self._by_category)

    def clear(self) -> None:
        """Reset state. Test isolation only."""
        self._by_id.clear()
        self._by_category.clear()

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __iter__(self) -> Iterator[AuditRule]:
        return iter(self.all_rules())
