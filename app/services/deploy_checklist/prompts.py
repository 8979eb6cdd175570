"""
Prompts for the Deploy Checklist analysis.
"""

from typing import Dict, List, Optional

from langchain_core.prompts import ChatPromptTemplate

from app.services.deploy_checklist.repo_config import RepoConfig
from app.services.deploy_checklist.rules import Rule
from app.services.deploy_checklist.schemas import PRMetadata

SYSTEM_PROMPT = """You are a deploy checklist analyzer. You examine pull request diffs and \
decide which deploy checks apply, based on the active rules you are given.

Return your findings through the AnalysisResult tool. Only include items genuinely \
relevant to the actual changes in the diff."""

# The user message is assembled in Python; the template only places it.
ANALYSIS_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        ("human", "{payload}"),
    ]
)


def format_rule(rule: Rule) -> str:
    """Format one active rule. Trigger fields are listed only when set."""
    parts = [f"### Rule: {rule.id}", f"Description: {rule.description}"]
    trigger = rule.trigger

    if trigger.paths:
        parts.append(f"Trigger paths: {', '.join(trigger.paths)}")
    if trigger.content:
        parts.append(
            f"Trigger content patterns: {', '.join(p.pattern for p in trigger.content)}"
        )
    if trigger.missing_companion:
        parts.append(
            f"Expected companion files: {', '.join(trigger.missing_companion)}"
        )
    if rule.context:
        parts.append(rule.context.strip())

    parts.append("Checks:")
    parts.extend(f"  - {check}" for check in rule.checks)
    return "\n".join(parts)


def build_user_prompt(
    config: RepoConfig,
    pr: PRMetadata,
    diff: str,
    active_rules: List[Rule],
    uncovered_files: Optional[List[str]] = None,
    file_contents: Optional[Dict[str, str]] = None,
    truncated: bool = False,
) -> str:
    """
    Build the user message for the analysis.

    Section order: active rules, repository context, PR information, full
    file contents, uncovered files, diff, instructions. Repository context
    comes after the generic rule knowledge so repository-specific facts
    override it.
    """
    sections: List[str] = []

    if active_rules:
        rules_text = "\n\n".join(format_rule(rule) for rule in active_rules)
        sections.append(f"## Active Rules\n{rules_text}")

    if config.context and config.context.strip():
        sections.append(f"## Repository Context\n{config.context.strip()}")

    sections.append(
        "## PR Information\n"
        f"Title: {pr.title}\n"
        f"Description: {pr.body or '(no description)'}\n"
        f"Base branch: {pr.base_branch}\n"
        f"Author: {pr.author}\n"
        f"Files changed: {', '.join(pr.files_changed)}"
    )

    if file_contents:
        file_sections = [
            "## Full File Contents (for context)",
            "The following files triggered a rule. Full content is provided so you can identify",
            "the framework/ORM and assess whether changes affect the database schema.",
        ]
        for path, content in file_contents.items():
            file_sections.append(f"\n### {path}\n```\n{content}\n```")
        sections.append("\n".join(file_sections))

    if uncovered_files:
        sections.append(
            "\n".join(
                [
                    "## Files Without Rule Coverage",
                    "The following changed files were not matched by any active rule.",
                    "For each, add an entry to open_concerns if you spot a deploy risk:",
                    "",
                    *(f"- {path}" for path in uncovered_files),
                ]
            )
        )

    diff_header = "## Diff"
    if truncated:
        diff_header += (
            "\nThe diff was shortened to fit the size budget; omitted files are listed"
            " at the end."
        )
    sections.append(f"{diff_header}\n```diff\n{diff}\n```")

    sections.append(
        "## Instructions\n"
        "Return a single AnalysisResult tool call; do not answer in prose.\n"
        "For each active rule, evaluate its checks against the diff.\n"
        "Only include items genuinely relevant to the actual changes.\n"
        "Use the rule id exactly as given for rule_id.\n"
        "Be specific: reference actual file names, function names, and line numbers from the diff.\n"
        "For uncovered files, add to open_concerns only if you spot a real deploy risk."
    )

    return "\n\n".join(sections)
