"""Structured-output analysis request for the Deploy Checklist agent."""

import asyncio
from typing import Any, Optional

from app.core.config import settings
from app.core.llm import build_llm
from app.core.logging import get_logger
from app.services.deploy_checklist.prompts import ANALYSIS_PROMPT
from app.services.deploy_checklist.schemas import AnalysisResult

logger = get_logger(__name__)


class AnalysisRequester:
    """
    Sends the assembled payload to the chat model and validates the reply.

    The model is bound with a forced tool call whose only argument schema is
    AnalysisResult, so no free-text parsing ever happens. Every failure
    (transport, auth, timeout, schema validation, missing tool call) yields
    None; nothing is raised past this boundary.
    """

    def __init__(self, llm: Any = None, timeout: Optional[float] = None):
        self._llm = llm
        self.timeout = settings.LLM_TIMEOUT_SECONDS if timeout is None else timeout

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = build_llm()
        return self._llm

    async def request(self, payload: str) -> Optional[AnalysisResult]:
        """
        Run the analysis.

        Args:
            payload: User message built by build_user_prompt().

        Returns:
            A validated AnalysisResult, or None on any failure.
        """
        try:
            structured = self.llm.with_structured_output(
                AnalysisResult, method="function_calling"
            )
            chain = ANALYSIS_PROMPT | structured
            result = await asyncio.wait_for(
                chain.ainvoke({"payload": payload}), timeout=self.timeout
            )
            if isinstance(result, dict):
                result = AnalysisResult(**result)
        except asyncio.TimeoutError:
            logger.error("Analysis timed out after %.0fs", self.timeout)
            return None
        except Exception as e:
            logger.error("Analysis failed: %s", e, exc_info=True)
            return None

        if not isinstance(result, AnalysisResult):
            logger.error("Analysis returned no structured result (%r)", type(result))
            return None

        logger.info(
            "Analysis produced %d item(s): %s", len(result.items), result.summary
        )
        return result
