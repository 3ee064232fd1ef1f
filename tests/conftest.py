"""Shared fixtures: a fake chat model and an invoker wired to it."""

from __future__ import annotations

import asyncio
import json

import pytest
from langchain_core.messages import AIMessage

from vnr_chat.models import GenerationConfig
from vnr_chat.services.model_invoker import ModelInvoker

VALID_QUIZ = {
    "question": "Hội nghị thành lập Đảng do ai chủ trì?",
    "options": {
        "A": "Nguyễn Ái Quốc",
        "B": "Trần Phú",
        "C": "Lê Hồng Phong",
        "D": "Hà Huy Tập",
    },
    "correctAnswer": "A",
    "explanation": "Nguyễn Ái Quốc chủ trì Hội nghị hợp nhất đầu năm 1930.",
}


class FakeLLM:
    """Stands in for ChatGroq: returns a fixed reply, raises an error, or stalls."""

    def __init__(self, reply: str = "", error: Exception | None = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    async def ainvoke(self, prompt: str) -> AIMessage:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


class FakeFactory:
    """llm_factory that hands out FakeLLMs by model name and records each request."""

    def __init__(self, llms: dict[str, FakeLLM]) -> None:
        self.llms = llms
        self.calls: list[tuple[str, GenerationConfig]] = []

    def __call__(self, model_name: str, generation: GenerationConfig) -> FakeLLM:
        self.calls.append((model_name, generation))
        return self.llms[model_name]

    @property
    def called_models(self) -> list[str]:
        return [name for name, _ in self.calls]


def make_invoker(llms: dict[str, FakeLLM]) -> tuple[ModelInvoker, FakeFactory]:
    factory = FakeFactory(llms)
    return ModelInvoker("test-key", list(llms), llm_factory=factory), factory


@pytest.fixture
def generation() -> GenerationConfig:
    return GenerationConfig(max_output_tokens=100, temperature=0.5)


@pytest.fixture
def valid_quiz() -> dict:
    return json.loads(json.dumps(VALID_QUIZ))
