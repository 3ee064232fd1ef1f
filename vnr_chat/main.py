"""
VNR CHAT MAIN API
=================

This module defines the FastAPI application and all HTTP endpoints for the
history-of-the-Party study assistant.

ENDPOINTS:
  GET  /        - Returns API name and list of endpoints.
  GET  /health  - Returns whether the services are initialized.
  POST /chat    - Persona chat: {message} -> {message, success}.
  POST /quiz    - {action: "generate"} -> {success, quiz}
                  {action: "check", selectedAnswer, question} -> {success, isCorrect, correctAnswer, explanation}

ERRORS:
  Every failure returns {error, details, success: false} with a status picked by
  classify_error(): 400 bad input or model error, 401 API key, 408 timeout,
  429 quota, 500 anything else. A malformed quiz reply is not an error: the
  fixed fallback question is returned instead.

STARTUP:
  The lifespan function checks the configuration (no API key -> the server does
  not start), then builds one ModelInvoker shared by the chat and quiz services.
  Requests share no mutable state; each one is answered independently.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import uvicorn

from config import (
    CHAT_MAX_OUTPUT_TOKENS,
    CHAT_TEMPERATURE,
    CHAT_TIMEOUT_SECONDS,
    GROQ_API_KEY,
    GROQ_MODELS,
    MAX_MESSAGE_LENGTH,
    QUIZ_MAX_OUTPUT_TOKENS,
    QUIZ_TEMPERATURE,
    QUIZ_TIMEOUT_SECONDS,
    validate_server_config,
)
from vnr_chat.errors import InvalidInputError, classify_error
from vnr_chat.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    GenerationConfig,
    QuizCheckResponse,
    QuizGenerateResponse,
    QuizQuestion,
    QuizRequest,
)
from vnr_chat.services.chat_service import ChatService
from vnr_chat.services.model_invoker import ModelInvoker
from vnr_chat.services.quiz_service import QuizService


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("VNR")

CHAT_ERROR = "Failed to get response from AI"
QUIZ_ERROR = "Failed to process quiz request"


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCES
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by all route handlers.
chat_service: ChatService = None
quiz_service: QuizService = None


def build_services(api_key: str, model_names: list) -> tuple:
    """Create the shared invoker and the two services with their call-site settings."""
    invoker = ModelInvoker(api_key, model_names)
    chat = ChatService(
        invoker,
        GenerationConfig(max_output_tokens=CHAT_MAX_OUTPUT_TOKENS, temperature=CHAT_TEMPERATURE),
        CHAT_TIMEOUT_SECONDS,
    )
    quiz = QuizService(
        invoker,
        GenerationConfig(max_output_tokens=QUIZ_MAX_OUTPUT_TOKENS, temperature=QUIZ_TEMPERATURE),
        QUIZ_TIMEOUT_SECONDS,
    )
    return chat, quiz

# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Validate configuration and build the services.

    A missing GROQ_API_KEY raises ConfigurationError here, so uvicorn exits
    instead of serving requests that could only fail.
    """
    global chat_service, quiz_service

    logger.info("=" * 60)
    logger.info("VNR Chat - Starting Up...")
    logger.info("=" * 60)

    try:
        validate_server_config()
        chat_service, quiz_service = build_services(GROQ_API_KEY, GROQ_MODELS)
        logger.info("Chat service and quiz service ready")
        logger.info("Docs: http://localhost:8000/docs")
    except Exception as e:
        logger.error(f"Fatal error during startup: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down VNR Chat...")
    chat_service = None
    quiz_service = None


# -------------------------------------------------------------------------
# FASTAPI APP AND CORS
# -------------------------------------------------------------------------
app = FastAPI(
    title="VNR Chat API",
    description="Persona chat and quiz on the history of the Communist Party of Vietnam",
    lifespan=lifespan
)

# Allow any origin so a browser front-end on another port can call this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, error: str, details: str = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def failure_response(exc: Exception, error: str) -> JSONResponse:
    """Log exc and turn it into the error envelope with the classified status."""
    info = classify_error(exc)
    logger.error(f"{error}: {exc}", exc_info=True)
    return error_response(info.status_code, error, info.details)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return error_response(exc.status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Body that is not JSON (or not an object): same 400 envelope as a missing field.
    logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return error_response(InvalidInputError.status_code, "Invalid request body")


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint."""
    return {
        "message": "VNR Chat API",
        "endpoints": {
            "/chat": "Persona chat (POST {message})",
            "/quiz": "Quiz (POST {action: generate|check})",
            "/health": "System health check"
        }
    }


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "chat_service": chat_service is not None,
        "quiz_service": quiz_service is not None,
    }


@app.post("/chat")
async def chat(request: ChatRequest):
    """
    Answer one question in the persona's voice.

    REQUEST BODY:
    {"message": "Bác ơi, tư tưởng Hồ Chí Minh là gì?"}

    RESPONSE:
    {"message": "Bác xin chào các cháu. ...", "success": true}
    """
    if not request.message or not request.message.strip():
        raise InvalidInputError("Message is required")
    if len(request.message) > MAX_MESSAGE_LENGTH:
        raise InvalidInputError(f"Message is too long (max {MAX_MESSAGE_LENGTH} characters)")
    if not chat_service:
        return error_response(503, "Chat service not initialized")

    try:
        text = await chat_service.reply(request.message)
        return ChatResponse(message=text).model_dump()
    except Exception as e:
        return failure_response(e, CHAT_ERROR)


@app.post("/quiz")
async def quiz(request: QuizRequest):
    """
    Generate a question or grade an answer.

    generate: asks the model for a new question; a malformed reply yields the
              fixed fallback question, still with success: true.
    check:    grades selectedAnswer against the question sent back by the
              client; no model call.
    """
    if not request.action:
        raise InvalidInputError("Action is required")

    if request.action == "generate":
        if not quiz_service:
            return error_response(503, "Quiz service not initialized")
        try:
            question = await quiz_service.generate(request.topic)
            return QuizGenerateResponse(quiz=question).model_dump(by_alias=True)
        except Exception as e:
            return failure_response(e, QUIZ_ERROR)

    if request.action == "check":
        if not request.question or not request.selected_answer:
            raise InvalidInputError("Missing question or answer")
        try:
            question = QuizQuestion.model_validate(request.question)
        except ValidationError as e:
            logger.warning(f"Invalid question in check request: {e.error_count()} problem(s)")
            return error_response(400, "Invalid question", str(e))
        result = QuizService.check(question, request.selected_answer)
        return QuizCheckResponse(
            isCorrect=result.is_correct,
            correctAnswer=result.correct_answer,
            explanation=result.explanation,
        ).model_dump(by_alias=True)

    raise InvalidInputError("Invalid action")


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m vnr_chat.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py)."""
    uvicorn.run(
        "vnr_chat.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info"
    )

if __name__ == "__main__":
    run()
