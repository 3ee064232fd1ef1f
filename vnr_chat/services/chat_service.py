"""
CHAT SERVICE MODULE
===================

Persona chat: build the prompt for the user's question, send it through the
model invoker, and return the trimmed reply. The server keeps no conversation
state; each message is answered on its own and the client keeps the history.
"""

import logging

from vnr_chat.models import GenerationConfig
from vnr_chat.services.extractor import extract_chat_text
from vnr_chat.services.model_invoker import ModelInvoker
from vnr_chat.services.prompts import build_chat_prompt


logger = logging.getLogger("VNR")


class ChatService:
    """Answers one question at a time in the persona's voice."""

    def __init__(self, invoker: ModelInvoker, generation: GenerationConfig, timeout: float):
        self.invoker = invoker
        self.generation = generation
        self.timeout = timeout

    async def reply(self, message: str) -> str:
        """
        Return the assistant's answer to message.

        Raises FatalModelError / ExhaustedModelsError from the invoker, or
        EmptyResponseError if the model returned only whitespace.
        """
        prompt = build_chat_prompt(message)
        raw = await self.invoker.complete(prompt, self.generation, self.timeout)
        text = extract_chat_text(raw)
        logger.info("Chat reply generated (%d chars)", len(text))
        return text
