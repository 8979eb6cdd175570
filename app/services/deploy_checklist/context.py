"""
LangGraph Runtime Context for the Deploy Checklist workflow.

Defines the context schema for dependency injection into LangGraph nodes.
"""

from dataclasses import dataclass

from app.integrations.github import GitHubClient
from app.services.deploy_checklist.analyzer import AnalysisRequester


@dataclass
class Ctx:
    """Runtime context for LangGraph nodes.

    Attributes:
        github: Client authenticated for the PR's installation.
        requester: Structured-output analysis requester.
    """

    github: GitHubClient
    requester: AnalysisRequester
