"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for API requests, responses, the
quiz question itself, and the terminal client's chat history. FastAPI uses
these to read incoming JSON and to serialize responses; the quiz pipeline uses
QuizQuestion to validate what the model returned.

MODELS:
  ChatMessage          - One message in a conversation (role + content).
  GenerationConfig     - max output tokens + temperature sent with each completion.
  QuizOptions          - The four lettered answers A, B, C, D.
  QuizQuestion         - question + options + correctAnswer + explanation.
  QuizResult           - Outcome of grading one selected letter.
  ChatRequest          - Body of POST /chat.
  QuizRequest          - Body of POST /quiz (generate or check).
  ChatResponse, QuizGenerateResponse, QuizCheckResponse, ErrorResponse
                       - Response bodies.

JSON field names follow the browser front-end (correctAnswer, selectedAnswer,
isCorrect), so those fields carry camelCase aliases.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# The only letters a quiz question can use, in display order.
OPTION_LETTERS = ("A", "B", "C", "D")

OptionLetter = Literal["A", "B", "C", "D"]

# ==============================================================================
# CHAT
# ==============================================================================

class ChatMessage(BaseModel):
    """
    A single message in a conversation (user or assistant).
    No timestamp; position in the list defines chronology.
    """
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class GenerationConfig(BaseModel):
    """Tunable parameters sent with a completion request. Constant per call site."""
    model_config = ConfigDict(frozen=True)

    max_output_tokens: int = Field(..., gt=0)
    temperature: float = Field(..., ge=0.0, le=2.0)

# ==============================================================================
# QUIZ
# ==============================================================================

class QuizOptions(BaseModel):
    """The four answers. Every letter must be present with non-empty text."""
    model_config = ConfigDict(frozen=True)

    A: str = Field(..., min_length=1)
    B: str = Field(..., min_length=1)
    C: str = Field(..., min_length=1)
    D: str = Field(..., min_length=1)


class QuizQuestion(BaseModel):
    """
    One multiple-choice question.

    Built from the model's JSON reply (or the fixed fallback question) and never
    changed afterwards. Because QuizOptions requires all four letters,
    correct_answer always names an option that exists.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(..., min_length=1)
    options: QuizOptions
    correct_answer: OptionLetter = Field(..., alias="correctAnswer")
    explanation: str = Field(..., min_length=1)

    def to_json(self) -> dict:
        """Serialize with the front-end field names."""
        return self.model_dump(by_alias=True)


class QuizResult(BaseModel):
    """Outcome of grading one answer against a question."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_correct: bool = Field(..., alias="isCorrect")
    correct_answer: OptionLetter = Field(..., alias="correctAnswer")
    explanation: str

# ==============================================================================
# REQUEST BODIES
# ==============================================================================
# Every field is optional here: a missing field must produce our own 400
# envelope, not FastAPI's 422 validation response.

class ChatRequest(BaseModel):
    """Body of POST /chat. message is required by the endpoint, not by the schema."""
    message: Optional[str] = None


class QuizRequest(BaseModel):
    """
    Body of POST /quiz.

    - action: "generate" or "check".
    - selectedAnswer, question: required for "check". question is kept as a raw
      dict so the endpoint can report a malformed question as a 400.
    - topic: optional, narrows what "generate" asks the model for.
    """
    model_config = ConfigDict(populate_by_name=True)

    action: Optional[str] = None
    selected_answer: Optional[str] = Field(None, alias="selectedAnswer")
    question: Optional[dict] = None
    topic: Optional[str] = None

# ==============================================================================
# RESPONSE BODIES
# ==============================================================================

class ChatResponse(BaseModel):
    message: str
    success: bool = True


class QuizGenerateResponse(BaseModel):
    success: bool = True
    quiz: QuizQuestion


class QuizCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    is_correct: bool = Field(..., alias="isCorrect")
    correct_answer: OptionLetter = Field(..., alias="correctAnswer")
    explanation: str


class ErrorResponse(BaseModel):
    """Envelope for every failure: the caller always gets JSON, never a bare fault."""
    error: str
    details: Optional[str] = None
    success: bool = False


class ChatHistory(BaseModel):
    """
    Versioned envelope the terminal client stores under its history key.
    A stored blob with a different version is discarded on load.
    """
    version: int
    messages: List[ChatMessage]
