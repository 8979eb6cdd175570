"""
Tests for the structured-output analysis requester.

The chat model is replaced by a stub whose structured-output runnable is a
RunnableLambda, so the real prompt | model chain is exercised offline.
"""

import asyncio

import pytest
from langchain_core.runnables import RunnableLambda

from app.services.deploy_checklist.analyzer import AnalysisRequester
from app.services.deploy_checklist.schemas import AnalysisResult
from tests.conftest import make_item


class StubLLM:
    def __init__(self, fn):
        self.fn = fn
        self.calls = []

    def with_structured_output(self, schema, method=None):
        self.calls.append((schema, method))
        return RunnableLambda(self.fn)


def _valid_result():
    return AnalysisResult(items=[make_item()], summary="Adds an orders table.")


class TestAnalysisRequester:
    @pytest.mark.asyncio
    async def test_returns_validated_result(self):
        llm = StubLLM(lambda _prompt: _valid_result())
        result = await AnalysisRequester(llm=llm).request("payload")

        assert result == _valid_result()
        assert llm.calls == [(AnalysisResult, "function_calling")]

    @pytest.mark.asyncio
    async def test_prompt_carries_payload(self):
        seen = []

        def reply(prompt_value):
            seen.extend(prompt_value.to_messages())
            return _valid_result()

        await AnalysisRequester(llm=StubLLM(reply)).request("the payload")

        assert seen[-1].content == "the payload"

    @pytest.mark.asyncio
    async def test_dict_reply_is_validated(self):
        raw = {"items": [], "summary": "Docs only."}
        result = await AnalysisRequester(llm=StubLLM(lambda _p: raw)).request("p")

        assert result == AnalysisResult(items=[], summary="Docs only.")

    @pytest.mark.asyncio
    async def test_partial_reply_is_none(self):
        raw = {"items": []}
        result = await AnalysisRequester(llm=StubLLM(lambda _p: raw)).request("p")

        assert result is None

    @pytest.mark.asyncio
    async def test_blank_item_title_is_none(self):
        item = make_item().model_dump()
        item["check"] = "  "
        raw = {"items": [item], "summary": "Adds an orders table."}
        result = await AnalysisRequester(llm=StubLLM(lambda _p: raw)).request("p")

        assert result is None

    @pytest.mark.asyncio
    async def test_provider_error_is_none(self):
        def boom(_prompt):
            raise RuntimeError("401 Unauthorized")

        result = await AnalysisRequester(llm=StubLLM(boom)).request("p")
        assert result is None

    @pytest.mark.asyncio
    async def test_missing_tool_call_is_none(self):
        result = await AnalysisRequester(llm=StubLLM(lambda _p: None)).request("p")
        assert result is None

    @pytest.mark.asyncio
    async def test_timeout_is_none(self):
        async def slow(_prompt):
            await asyncio.sleep(1)
            return _valid_result()

        requester = AnalysisRequester(llm=StubLLM(slow), timeout=0.01)
        assert await requester.request("p") is None
