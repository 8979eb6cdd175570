"""
Agent state model for the Deploy Checklist workflow.

Pure graph state, nodes return partial updates of it.
"""

import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from app.services.deploy_checklist.repo_config import RepoConfig
from app.services.deploy_checklist.rules import Rule
from app.services.deploy_checklist.schemas import AnalysisResult, PRMetadata

Outcome = Literal["blocked", "approved", "error"]


class ChecklistAgentState(BaseModel):
    """
    State of the Deploy Checklist workflow.

    This is used by LangGraph to manage workflow state, not a database table.
    """

    run_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="The id of the run."
    )
    owner: str = Field(description="Repository owner.")
    repo: str = Field(description="Repository name.")
    pr_number: int = Field(description="The number of the PR.")
    pr: PRMetadata = Field(default_factory=PRMetadata)
    repo_config: RepoConfig = Field(default_factory=RepoConfig)

    diff: str = Field(default="", description="Raw unified diff of the PR.")
    changed_files: List[str] = Field(default_factory=list)
    active_rules: List[Rule] = Field(default_factory=list)
    uncovered_files: List[str] = Field(default_factory=list)

    budgeted_diff: str = Field(default="", description="Diff after size budgeting.")
    diff_truncated: bool = False
    omitted_files: List[str] = Field(default_factory=list)
    file_contents: Dict[str, str] = Field(
        default_factory=dict, description="Full bodies of rule-requested files."
    )

    analysis: Optional[AnalysisResult] = Field(
        default=None, description="Validated model reply; None means no result."
    )
    outcome: Optional[Outcome] = None
    comment_id: Optional[int] = Field(
        default=None, description="Id of the checklist comment on the PR."
    )

    @property
    def focus_rules(self) -> List[Rule]:
        """Active rules plus every repository rule, used for budgeting and file fetches."""
        active_ids = {rule.id for rule in self.active_rules}
        return self.active_rules + [
            rule for rule in self.repo_config.rules if rule.id not in active_ids
        ]
