"""Pass-through adapter for the ZAP replacer add-on."""

import logging
from collections.abc import Iterable

from zapdriver.modules.engine import ZapClient, flag

from .models import ReplacerRule

logger = logging.getLogger(__name__)


class ReplacerConfigurator:
    """Apply replacer rules to the engine and reset them between runs."""

    def __init__(self, zap: ZapClient):
        self.zap = zap

    def configure(self, rules: Iterable[ReplacerRule] | None) -> None:
        """Install rules, replacing any existing rule with the same description."""
        rules = list(rules or [])
        if not rules:
            return
        existing = self._descriptions()
        for rule in rules:
            if rule.description in existing:
                self.zap.replacer.remove_rule(description=rule.description)
            self.zap.replacer.add_rule(
                description=rule.description,
                enabled=flag(rule.enabled),
                matchtype=rule.match_type,
                matchregex=flag(rule.match_regex),
                matchstring=rule.match_string,
                replacement=rule.replacement,
                initiators=rule.initiators,
            )
            existing.add(rule.description)
        logger.debug("Configured %d replacer rules", len(rules))

    def reset(self) -> None:
        """Remove every replacer rule currently known to the engine."""
        descriptions = self._descriptions()
        for description in sorted(descriptions):
            self.zap.replacer.remove_rule(description=description)
        logger.debug("Removed %d replacer rules", len(descriptions))

    def _descriptions(self) -> set[str]:
        rules = self.zap.replacer.rules
        if not isinstance(rules, list):
            return set()
        return {
            str(rule.get("description"))
            for rule in rules
            if isinstance(rule, dict) and rule.get("description")
        }
