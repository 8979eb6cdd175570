"""
LLM Client Initialization.

Builds the chat model used for checklist analysis. Construction is deferred
to first use so importing the application never requires an API key.
"""

from functools import lru_cache

from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from app.core.config import settings


@lru_cache(maxsize=1)
def build_llm() -> ChatOpenAI:
    """
    Build the LLM instance.
    """
    return ChatOpenAI(
        api_key=SecretStr(settings.OPENAI_API_KEY),
        model=settings.LLM_MODEL,
        temperature=0,
        max_completion_tokens=settings.LLM_MAX_COMPLETION_TOKENS,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        max_retries=3,
    )
