"""
QUIZ SERVICE MODULE
===================

generate(): ask the model for one question and extract it, falling back to the
fixed question when the reply is malformed. Errors from the model call itself
(bad key, quota, timeout, every model failing) still propagate to the endpoint.

check(): grade a letter against a question. No model call, so it is a static
method and works even before the services are built.
"""

import logging
from typing import Optional

from vnr_chat.models import GenerationConfig, QuizQuestion, QuizResult
from vnr_chat.services.extractor import extract_quiz_or_fallback
from vnr_chat.services.grader import grade
from vnr_chat.services.model_invoker import ModelInvoker
from vnr_chat.services.prompts import build_quiz_prompt


logger = logging.getLogger("VNR")


class QuizService:

    def __init__(self, invoker: ModelInvoker, generation: GenerationConfig, timeout: float):
        self.invoker = invoker
        self.generation = generation
        self.timeout = timeout

    async def generate(self, topic: Optional[str] = None) -> QuizQuestion:
        prompt = build_quiz_prompt(topic)
        raw = await self.invoker.complete(prompt, self.generation, self.timeout)
        question = extract_quiz_or_fallback(raw)
        logger.info("Quiz question ready: %s", question.question[:80])
        return question

    @staticmethod
    def check(question: QuizQuestion, selected: str) -> QuizResult:
        result = grade(question, selected)
        logger.info("Answer %s checked: %s", selected, "correct" if result.is_correct else "wrong")
        return result
