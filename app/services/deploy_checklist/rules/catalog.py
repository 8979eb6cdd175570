"""
Rule catalog loading utilities.
"""

import os
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Tuple

import yaml

from app.services.deploy_checklist.rules.types import Rule

BUILTIN_RULES_PATH = os.path.join(os.path.dirname(__file__), "builtin_rules.yaml")


def load_rules_file(path: str) -> Dict[str, Any]:
    """
    Load a rule catalog from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Dictionary containing the catalog.
    """
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_rules(catalog: Dict[str, Any]) -> List[Rule]:
    """
    Build Rule objects from a catalog dictionary.

    Raises:
        pydantic.ValidationError: if any rule is malformed.
    """
    return [Rule.model_validate(raw) for raw in catalog.get("rules") or []]


@lru_cache(maxsize=1)
def _builtin_rules() -> Tuple[Rule, ...]:
    return tuple(parse_rules(load_rules_file(BUILTIN_RULES_PATH)))


def get_builtin_rules() -> List[Rule]:
    """The rules shipped with the bot, in catalog order."""
    return list(_builtin_rules())


def merge_rule_catalogs(defaults: Iterable[Rule], overrides: Iterable[Rule]) -> List[Rule]:
    """
    Overlay *overrides* on *defaults*, keyed by rule id.

    Pass one inserts the defaults, pass two the overrides. An override with a
    known id replaces that default in place; new ids are appended in order.
    """
    catalog: Dict[str, Rule] = {}
    for rule in defaults:
        catalog[rule.id] = rule
    for rule in overrides:
        catalog[rule.id] = rule
    return list(catalog.values())
