"""
Nodes package for the Deploy Checklist workflow.
"""

from app.services.deploy_checklist.nodes.pr_io import (
    fetch_diff,
    fetch_full_files,
)
from app.services.deploy_checklist.nodes.analysis import (
    classify_change,
    budget_diff,
    request_analysis,
)
from app.services.deploy_checklist.nodes.publish import (
    find_bot_comment,
    publish_checklist,
)

__all__ = [
    "fetch_diff",
    "fetch_full_files",
    "classify_change",
    "budget_diff",
    "request_analysis",
    "find_bot_comment",
    "publish_checklist",
]
