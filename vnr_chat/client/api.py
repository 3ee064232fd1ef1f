"""
CLIENT API MODULE
=================

Thin requests wrapper around the two server endpoints. Every failure (server
down, timeout, non-2xx status, success: false) becomes an ApiError whose message
is the server's "error" field, else its "details", else "HTTP <status>".
"""

from typing import Optional

import requests

from vnr_chat.models import OptionLetter, QuizQuestion, QuizResult


class ApiError(Exception):
    """Any failed call to the server, with a message ready to show the user."""


class ApiClient:

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 90.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: dict, fallback_error: str) -> dict:
        try:
            response = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        except requests.exceptions.ConnectionError:
            raise ApiError("Cannot connect to backend. Start it with: python run.py")
        except requests.exceptions.Timeout:
            raise ApiError("Request timed out")
        except requests.exceptions.RequestException as e:
            raise ApiError(str(e))

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            raise ApiError(data.get("error") or data.get("details") or f"HTTP {response.status_code}")
        if not data.get("success"):
            raise ApiError(data.get("error") or data.get("details") or fallback_error)
        return data

    def chat(self, message: str) -> str:
        data = self._post("/chat", {"message": message}, "Failed to get response")
        return data.get("message", "")

    def generate_quiz(self, topic: Optional[str] = None) -> QuizQuestion:
        payload = {"action": "generate"}
        if topic:
            payload["topic"] = topic
        data = self._post("/quiz", payload, "Invalid response format")
        if not data.get("quiz"):
            raise ApiError("Invalid response format")
        try:
            return QuizQuestion.model_validate(data["quiz"])
        except ValueError:
            raise ApiError("Invalid response format")

    def check_answer(self, question: QuizQuestion, selected: OptionLetter) -> QuizResult:
        payload = {
            "action": "check",
            "selectedAnswer": selected,
            "question": question.to_json(),
        }
        data = self._post("/quiz", payload, "Failed to check answer")
        try:
            return QuizResult.model_validate(data)
        except ValueError:
            raise ApiError("Invalid response format")
