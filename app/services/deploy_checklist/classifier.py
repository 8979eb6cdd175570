"""
Deterministic rule classification.

Decides which rules of the catalog apply to a change set using surface-level
path globs and diff regexes. Recall is favoured over precision; the model
filters false positives downstream.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from app.services.deploy_checklist.rules import (
    Rule,
    any_path_matches,
    content_matches,
    get_builtin_rules,
    path_matches_any,
)


class ClassificationResult(BaseModel):
    """Rules that fired for a change set, plus files none of them claim."""

    active: List[Rule] = Field(default_factory=list)
    uncovered: List[str] = Field(default_factory=list)


def rule_matches(rule: Rule, changed_paths: List[str], diff_text: str) -> bool:
    """
    Evaluate one rule's trigger.

    The path route fires when a changed path matches the rule's globs; for a
    rule with companion globs it additionally requires that no changed path
    matches a companion. The content route fires on any regex hit in the diff.
    """
    trigger = rule.trigger

    path_hit = any_path_matches(changed_paths, trigger.paths)
    if path_hit and trigger.missing_companion:
        path_hit = not any_path_matches(changed_paths, trigger.missing_companion)

    return path_hit or content_matches(diff_text, trigger.content)


def compute_uncovered_files(
    changed_paths: Iterable[str], active_rules: Iterable[Rule]
) -> List[str]:
    """
    Changed paths matched by no active rule's primary or companion globs.

    Content-only rules have no globs and cover nothing, so a file that
    triggered such a rule can still be reported here.
    """
    patterns = [p for rule in active_rules for p in rule.coverage_patterns]
    return [path for path in changed_paths if not path_matches_any(path, patterns)]


def classify(
    changed_paths: List[str], diff_text: str, rules: Optional[List[Rule]] = None
) -> ClassificationResult:
    """
    Classify a change set against a rule catalog.

    Args:
        changed_paths: Paths changed by the pull request.
        diff_text: Raw unified diff.
        rules: Catalog to evaluate; defaults to the built-in rules.

    Returns:
        ClassificationResult with active rules in catalog order.
    """
    catalog = get_builtin_rules() if rules is None else rules
    active = [rule for rule in catalog if rule_matches(rule, changed_paths, diff_text)]
    return ClassificationResult(
        active=active, uncovered=compute_uncovered_files(changed_paths, active)
    )
