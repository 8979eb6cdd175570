"""
Rule catalog for the Deploy Checklist agent.
"""

from app.services.deploy_checklist.rules.catalog import (
    get_builtin_rules,
    merge_rule_catalogs,
    parse_rules,
)
from app.services.deploy_checklist.rules.matching import (
    any_path_matches,
    content_matches,
    glob_match,
    path_matches_any,
)
from app.services.deploy_checklist.rules.types import ContentPattern, Rule, Trigger

__all__ = [
    "get_builtin_rules",
    "merge_rule_catalogs",
    "parse_rules",
    "any_path_matches",
    "content_matches",
    "glob_match",
    "path_matches_any",
    "ContentPattern",
    "Rule",
    "Trigger",
]
