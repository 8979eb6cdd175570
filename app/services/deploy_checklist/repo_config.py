"""
Per-repository configuration for the Deploy Checklist agent.

A repository may commit a config file to add or override rules, give the
model repository-specific context, and tune which pull requests are analysed.
The file is read from the pull request's head commit, so config changes take
effect in the PR that makes them.
"""

import json
from typing import Any, Dict, List, Optional, Protocol, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

from app.core.logging import get_logger
from app.services.deploy_checklist.rules import (
    Rule,
    get_builtin_rules,
    merge_rule_catalogs,
)

logger = get_logger(__name__)

CONFIG_PATHS = (
    ".github/deploy-checklist.yml",
    ".github/deploy-checklist.yaml",
    ".deploy-checklist.json",
)


class ChecklistSettings(BaseModel):
    analyze_drafts: bool = False
    ignore_authors: List[str] = Field(default_factory=list)
    target_branches: List[str] = Field(
        default_factory=list, description="Base branches to analyse; empty means all."
    )
    post_empty_checklist: bool = False
    max_diff_size: int = Field(default=100000, gt=0)


class RepoConfig(BaseModel):
    version: int = 1
    settings: ChecklistSettings = Field(default_factory=ChecklistSettings)
    rules: List[Rule] = Field(default_factory=list)
    context: Optional[str] = Field(
        default=None, description="Free text appended after rule knowledge."
    )

    @property
    def catalog(self) -> List[Rule]:
        """Built-in rules overlaid by this repository's rules (same id = override)."""
        return merge_rule_catalogs(get_builtin_rules(), self.rules)


class FileSource(Protocol):
    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> Optional[str]: ...


def parse_config_content(content: str, path: str) -> Dict[str, Any]:
    """Parse config text as JSON or YAML depending on the file extension."""
    if path.endswith(".json"):
        return json.loads(content)
    return yaml.safe_load(content)


def _config_warning(path: str, error: Exception) -> str:
    return (
        f"**Deploy Checklist Bot**: Failed to parse config file `{path}`.\n\n"
        f"Error: {error}\n\n"
        "Using default rules instead. "
        "Please fix the config file to customize behavior."
    )


async def load_repo_config(
    github: FileSource, owner: str, repo: str, ref: str
) -> Tuple[RepoConfig, Optional[str]]:
    """
    Load the repository config at *ref*.

    Tries CONFIG_PATHS in order; the first file found wins.

    Returns:
        (config, warning). On a parse or validation error the defaults are
        returned together with a markdown warning for the PR author.

    Raises:
        httpx.HTTPError: if fetching a candidate file fails for a reason other
        than it not existing.
    """
    for path in CONFIG_PATHS:
        content = await github.get_file_content(owner, repo, path, ref)
        if content is None:
            continue

        try:
            raw = parse_config_content(content, path)
            # An empty placeholder file means defaults
            if not raw:
                return RepoConfig(), None
            config = RepoConfig.model_validate(raw)
        except (yaml.YAMLError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Invalid config %s in %s/%s@%s: %s", path, owner, repo, ref, e)
            return RepoConfig(), _config_warning(path, e)

        logger.info(
            "Loaded %s for %s/%s with %d custom rule(s)",
            path,
            owner,
            repo,
            len(config.rules),
        )
        return config, None

    return RepoConfig(), None
