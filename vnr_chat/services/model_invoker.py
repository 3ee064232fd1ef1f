"""
MODEL INVOKER MODULE
====================

Sends one prompt to the LLM, falling back across an ordered list of model names.

FLOW (per request):
  1. Take the model names in configured order.
  2. For each one, build a ChatGroq client with this call site's generation
     settings and await ainvoke(prompt) under asyncio.wait_for(timeout).
     If the timer fires first, the pending call is cancelled.
  3. First success: return the reply text; later models are never contacted.
  4. Failure mentioning the API key, the quota, or a timeout: stop and raise
     FatalModelError (every other model would fail the same way).
  5. Any other failure: log it and try the next model. If all fail, raise
     ExhaustedModelsError with the last error's message.

The invoker holds no per-request state; one instance serves every request.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence

from langchain_groq import ChatGroq

from vnr_chat.errors import RequestTimeoutError, is_fatal_error
from vnr_chat.models import GenerationConfig
from vnr_chat.utils.fallback import with_fallback


logger = logging.getLogger("VNR")

# (model_name, generation) -> anything with an async ainvoke(prompt) method.
LLMFactory = Callable[[str, GenerationConfig], Any]


def _content_to_text(content: Any) -> str:
    """AIMessage.content is usually a string; some providers return a list of blocks."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return "" if content is None else str(content)


class ModelInvoker:
    """
    Completion with per-attempt timeout and model-name fallback.

    llm_factory exists so tests (or another provider) can replace ChatGroq.
    """

    def __init__(self, api_key: str, model_names: Sequence[str], llm_factory: Optional[LLMFactory] = None):
        if not model_names:
            raise ValueError("At least one model name is required")
        self.api_key = api_key
        self.model_names: List[str] = list(model_names)
        self.llm_factory = llm_factory or self._create_groq_llm

    def _create_groq_llm(self, model_name: str, generation: GenerationConfig) -> ChatGroq:
        # max_retries=0: retrying is our fallback loop's job, not the SDK's.
        return ChatGroq(
            model=model_name,
            api_key=self.api_key,
            temperature=generation.temperature,
            max_tokens=generation.max_output_tokens,
            max_retries=0,
        )

    async def complete(self, prompt: str, generation: GenerationConfig, timeout: float) -> str:
        """Return the raw reply text of the first model that answers."""

        async def attempt(model_name: str) -> str:
            llm = self.llm_factory(model_name, generation)
            try:
                response = await asyncio.wait_for(llm.ainvoke(prompt), timeout=timeout)
            except asyncio.TimeoutError:
                raise RequestTimeoutError(f"Request timeout after {timeout:g}s ({model_name})")
            logger.info("Model %s answered", model_name)
            return _content_to_text(getattr(response, "content", response))

        return await with_fallback(self.model_names, attempt, is_fatal=is_fatal_error)
