from __future__ import annotations

from pash.rules.loader import LOCAL_PASH_DIR, LOCAL_RULES_DIR, RuleLoader, parse_rule_paths
from pash.rules.scaffold import DEFAULT_RULES, add_rule, init_rules, list_rules

__all__ = [
    "LOCAL_PASH_DIR",
    "LOCAL_RULES_DIR",
    "DEFAULT_RULES",
    "RuleLoader",
    "add_rule",
    "init_rules",
    "list_rules",
    "parse_rule_paths",
]
