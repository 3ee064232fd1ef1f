"""
RESPONSE EXTRACTOR MODULE
=========================

Turns raw model text into what the endpoints return.

QUIZ:
  Models often wrap JSON in ```json fences or add a sentence before/after it.
  We strip the fences, then decode the JSON objects found in the text and keep
  the first one that validates as a QuizQuestion. On any failure the quiz flow uses
  FALLBACK_QUESTION instead, so a malformed reply never reaches the user as an error.

CHAT:
  The reply is trimmed; an empty reply is an error (EmptyResponseError).
"""

import json
import logging
import re
from typing import Iterator

from pydantic import ValidationError

from vnr_chat.errors import EmptyResponseError, ExtractionError
from vnr_chat.models import QuizQuestion


logger = logging.getLogger("VNR")

_FENCE_RE = re.compile(r"```json\s*|```\s*")

_decoder = json.JSONDecoder()

# Used whenever the model's reply cannot be turned into a valid question.
FALLBACK_QUESTION = QuizQuestion(
    question="Đảng Cộng sản Việt Nam được thành lập vào ngày tháng năm nào?",
    options={
        "A": "3/2/1930",
        "B": "19/5/1941",
        "C": "2/9/1945",
        "D": "6/1/1930",
    },
    correctAnswer="A",
    explanation=(
        "Đảng Cộng sản Việt Nam được thành lập ngày 3/2/1930 tại Hội nghị hợp nhất "
        "các tổ chức cộng sản họp ở Cửu Long (Hương Cảng, Trung Quốc) dưới sự chủ trì "
        "của lãnh tụ Nguyễn Ái Quốc."
    ),
)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip())


def iter_json_objects(text: str) -> Iterator[dict]:
    """
    Yield every JSON object in text, left to right.

    Tries each "{" in turn, so a stray brace in the prose is skipped. After an
    object decodes, the search resumes past its end.
    """
    start = text.find("{")
    while start != -1:
        try:
            value, end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            yield value
            start = text.find("{", end)
        else:
            start = text.find("{", start + 1)


def find_json_object(text: str) -> dict:
    """Decode the first JSON object in text. Raises ExtractionError if none decodes."""
    for value in iter_json_objects(text):
        return value
    raise ExtractionError("No JSON found in response")


def extract_quiz_question(text: str) -> QuizQuestion:
    """
    Strict extraction: a valid QuizQuestion or ExtractionError.

    The first object that validates wins, so a small object mentioned in the
    prose before the question does not hide it.
    """
    last_error = None
    for data in iter_json_objects(strip_code_fences(text or "")):
        try:
            return QuizQuestion.model_validate(data)
        except ValidationError as e:
            last_error = e
    if last_error is None:
        raise ExtractionError("No JSON found in response")
    raise ExtractionError(
        f"Invalid quiz data structure: {last_error.error_count()} problem(s)"
    ) from last_error


def extract_quiz_or_fallback(text: str) -> QuizQuestion:
    """Extraction used by the quiz endpoint: falls back instead of failing."""
    try:
        return extract_quiz_question(text)
    except ExtractionError as e:
        logger.warning("Could not extract quiz question (%s); using fallback question", e)
        return FALLBACK_QUESTION


def extract_chat_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise EmptyResponseError("Empty response from Groq API")
    return cleaned
