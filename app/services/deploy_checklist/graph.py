"""
Deploy Checklist Agent Graph.

Builds the LangGraph StateGraph for one analysis of a pull request.
"""

from langgraph.graph import StateGraph, START, END

from app.services.deploy_checklist.state import ChecklistAgentState
from app.services.deploy_checklist.context import Ctx
from app.services.deploy_checklist.nodes import (
    fetch_diff,
    classify_change,
    budget_diff,
    fetch_full_files,
    request_analysis,
    publish_checklist,
)


# 1. Initialize Graph with context schema
workflow = StateGraph(ChecklistAgentState, context_schema=Ctx)

# 2. Add Nodes
workflow.add_node("fetch_diff", fetch_diff)
workflow.add_node("classify_change", classify_change)
workflow.add_node("budget_diff", budget_diff)
workflow.add_node("fetch_full_files", fetch_full_files)
workflow.add_node("request_analysis", request_analysis)
workflow.add_node("publish_checklist", publish_checklist)

# 3. Add Edges
workflow.add_edge(START, "fetch_diff")
workflow.add_edge("fetch_diff", "classify_change")
workflow.add_edge("classify_change", "budget_diff")
workflow.add_edge("budget_diff", "fetch_full_files")
workflow.add_edge("fetch_full_files", "request_analysis")
workflow.add_edge("request_analysis", "publish_checklist")
workflow.add_edge("publish_checklist", END)

# 4. Compile
deploy_checklist_graph = workflow.compile()
