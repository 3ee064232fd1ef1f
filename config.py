"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all VNR Chat settings: the LLM API key, the ordered list of
  model names to fall back across, generation settings per call site, request
  timeouts, the persona and quiz prompts, and the terminal client's settings.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes GROQ_API_KEY and GROQ_MODELS for the model invoker.
  - Defines max output tokens, temperature and per-attempt timeout for chat and quiz.
  - Holds the persona prompt (chat) and the quiz instruction prompt.
  - Defines where the terminal client keeps its local storage file.

USAGE:
  Import what you need: `from config import GROQ_API_KEY, GROQ_MODELS, PERSONA_PROMPT`
  The server calls validate_server_config() once at startup and refuses to
  start if the key or model list is missing. There is no built-in fallback key.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


# -----------------------------------------------------------------------------
# BASE PATH
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).parent


# ============================================================================
# GROQ API CONFIGURATION
# ============================================================================
# Groq is the LLM provider. One key is used for every request.
# GROQ_MODELS is an ordered, comma-separated list of model names: a request
# tries the first one, and only moves to the next if that model fails for a
# reason other than the key, the quota, or a timeout.

DEFAULT_GROQ_MODELS = "llama-3.3-70b-versatile,llama-3.1-8b-instant"


def _load_model_names(raw: str) -> list:
    """
    Split a comma-separated model list into names, keeping order.
    Blank entries (e.g. a trailing comma) are dropped.
    """
    return [name.strip() for name in raw.split(",") if name.strip()]


GROQ_API_KEY = os.getenv("GROQ_API_KEY", "").strip()
GROQ_MODELS = _load_model_names(os.getenv("GROQ_MODELS", DEFAULT_GROQ_MODELS))

# ============================================================================
# GENERATION SETTINGS
# ============================================================================
# Chat answers are longer and a bit more creative; quiz questions are short
# JSON objects, so they get fewer tokens and a lower temperature.
# Timeouts apply to each model attempt, not to the whole request.

CHAT_MAX_OUTPUT_TOKENS = 1000
CHAT_TEMPERATURE = 0.7
CHAT_TIMEOUT_SECONDS = float(os.getenv("CHAT_TIMEOUT_SECONDS", "30"))

QUIZ_MAX_OUTPUT_TOKENS = 500
QUIZ_TEMPERATURE = 0.5
QUIZ_TIMEOUT_SECONDS = float(os.getenv("QUIZ_TIMEOUT_SECONDS", "20"))

# Maximum length (characters) for a single user message. ~32K chars is ~8K tokens.
MAX_MESSAGE_LENGTH = 32_000

# ============================================================================
# PROMPTS
# ============================================================================
# The persona prompt answers in the voice of President Ho Chi Minh, based on
# published speeches and writings. The quiz prompt asks for exactly one
# multiple-choice question on the history of the Communist Party of Vietnam,
# returned as a bare JSON object.

PERSONA_PROMPT = """Bạn là Chủ tịch Hồ Chí Minh, dựa trên những tài liệu lịch sử, lời nói và tác phẩm đã được công bố chính thống.

Nhiệm vụ của bạn là:

Trả lời các câu hỏi của người dùng bằng giọng điệu giản dị, gần gũi, khiêm tốn nhưng sâu sắc, giống phong cách của Bác Hồ.

Luôn dùng ngôn ngữ trong sáng, chuẩn mực và tích cực, khuyến khích tinh thần học tập, đoàn kết, yêu nước, cần - kiệm - liêm - chính - chí công vô tư.

Khi trích dẫn hoặc diễn giải tư tưởng, ghi rõ đó là dựa trên lời nói, bài viết hoặc phong cách Hồ Chí Minh.

Nếu người dùng hỏi về các vấn đề lịch sử hoặc đạo đức, hãy phân tích dưới góc nhìn tư tưởng Hồ Chí Minh, có thể trích dẫn các câu nói nổi tiếng.

Khi trả lời, hãy mở đầu bằng lời chào thân mật như:

"Bác xin chào các cháu." hoặc "Cháu hỏi rất hay, Bác xin nói thế này..."

Cuối cùng, luôn giữ mục tiêu là giáo dục, truyền cảm hứng và khơi dậy lòng yêu nước cho người nghe."""

QUIZ_PROMPT = """Bạn là giáo viên chuyên về Lịch sử Đảng Cộng sản Việt Nam. Tạo một câu hỏi trắc nghiệm mới về Lịch sử Đảng với 4 đáp án A, B, C, D.

Yêu cầu:
- 1 đáp án đúng duy nhất
- Đáp án rõ ràng, không gây nhầm lẫn
- Giải thích chi tiết nhưng không quá dài

QUAN TRỌNG: Chỉ trả về JSON, không có text khác trước hoặc sau JSON.

Format JSON:
{
  "question": "Câu hỏi về Lịch sử Đảng",
  "options": {
    "A": "Đáp án A",
    "B": "Đáp án B",
    "C": "Đáp án C",
    "D": "Đáp án D"
  },
  "correctAnswer": "A",
  "explanation": "Giải thích chi tiết nhưng không quá dài"
}"""

# ============================================================================
# TERMINAL CLIENT
# ============================================================================
# The client keeps its chat history in a small JSON file that plays the role
# of browser local storage: one blob under one fixed key, with a version tag
# so older shapes can be discarded safely.

API_BASE_URL = os.getenv("VNR_API_URL", "http://localhost:8000").rstrip("/")
CLIENT_STORAGE_PATH = Path(
    os.getenv("VNR_CLIENT_STORAGE", str(BASE_DIR / "database" / "local_storage.json"))
)
CHAT_HISTORY_KEY = "vnr-chat-history"
CHAT_HISTORY_VERSION = 1

# Seconds the client waits for the server. A chat request may try every model,
# so allow for more than one attempt.
CLIENT_REQUEST_TIMEOUT = float(os.getenv("VNR_CLIENT_TIMEOUT", "90"))


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


def validate_server_config(api_key: str = None, model_names: list = None) -> None:
    """
    Check the settings the server cannot run without.

    Called from the FastAPI lifespan; raising here stops the process before it
    accepts any request. Arguments default to the values loaded from the environment.
    """
    api_key = GROQ_API_KEY if api_key is None else api_key
    model_names = GROQ_MODELS if model_names is None else model_names

    if not api_key:
        raise ConfigurationError("GROQ_API_KEY is not set. Add it to your environment or .env file.")
    if not model_names:
        raise ConfigurationError("GROQ_MODELS is empty. Provide at least one model name.")
    logger.info("Configuration OK: %d model(s) configured: %s", len(model_names), ", ".join(model_names))
