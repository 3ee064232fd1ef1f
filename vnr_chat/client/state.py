"""
CLIENT STATE MODULE
===================

The view model behind the terminal client: everything the user sees, in one object.

STATE:
  active_tab        - "chat" or "game".
  messages          - The conversation (list of ChatMessage), oldest first.
  current_question  - The quiz question on screen, or None.
  selected_answer   - The letter picked for that question, or None.
  result            - The grading result once checked, or None.
  is_loading / is_generating / is_checking
                    - Busy flags. While one is set, the matching action is ignored,
                      so a second request is never sent before the first returns.

PERSISTENCE:
  hydrate() restores messages from the history store. Every change to a
  non-empty message list rewrites the whole list. clear_chat() empties both
  memory and the stored blob. Quiz state is never stored.
"""

import logging
import re
from typing import List, Optional

from vnr_chat.client.api import ApiClient, ApiError
from vnr_chat.client.storage import ChatHistoryStore
from vnr_chat.models import OPTION_LETTERS, ChatMessage, QuizQuestion, QuizResult


logger = logging.getLogger("VNR")

TABS = ("chat", "game")


def format_message(text: str) -> str:
    """Strip markdown emphasis, turn "* " bullets into "•", collapse runs of blank lines."""
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    text = re.sub(r"\*(.*?)\*", r"\1", text)
    text = re.sub(r"\n\n+", "\n\n", text)
    text = re.sub(r"\*\s", "\n• ", text)
    text = re.sub(r"\n\s*\n\s*\n", "\n\n", text)
    return text.strip()


def chat_error_text(error: str) -> str:
    """Assistant message shown in the conversation when a chat request fails."""
    return f"Xin lỗi, đã có lỗi xảy ra: {error or 'Unknown error'}. Vui lòng thử lại."


class ClientState:

    def __init__(self, api: ApiClient, history: ChatHistoryStore):
        self.api = api
        self.history = history

        self.active_tab = "chat"
        self.messages: List[ChatMessage] = []

        self.current_question: Optional[QuizQuestion] = None
        self.selected_answer: Optional[str] = None
        self.result: Optional[QuizResult] = None

        self.is_loading = False
        self.is_generating = False
        self.is_checking = False

    # -------------------------------------------------------------------------
    # TABS AND HISTORY
    # -------------------------------------------------------------------------

    def switch_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab

    def hydrate(self) -> None:
        """Restore the stored conversation, if there is one."""
        stored = self.history.load()
        if stored:
            self.messages = stored

    def _append(self, message: ChatMessage) -> None:
        self.messages = self.messages + [message]
        self.history.save(self.messages)

    def clear_chat(self) -> None:
        self.messages = []
        self.history.clear()

    # -------------------------------------------------------------------------
    # CHAT
    # -------------------------------------------------------------------------

    def send_message(self, text: str) -> Optional[ChatMessage]:
        """
        Send text and append both sides of the exchange.

        Returns the assistant message (the reply, or an apology carrying the
        error), or None if nothing was sent: blank input or a request already
        in flight.
        """
        if not text or not text.strip() or self.is_loading:
            return None

        to_send = text.strip()
        self._append(ChatMessage(role="user", content=to_send))
        self.is_loading = True
        try:
            reply = ChatMessage(role="assistant", content=self.api.chat(to_send))
        except ApiError as e:
            logger.warning("Chat request failed: %s", e)
            reply = ChatMessage(role="assistant", content=chat_error_text(str(e)))
        finally:
            self.is_loading = False
        self._append(reply)
        return reply

    # -------------------------------------------------------------------------
    # QUIZ
    # -------------------------------------------------------------------------

    def generate_question(self, topic: Optional[str] = None) -> Optional[str]:
        """
        Replace the current question with a new one.

        Returns None on success, or the alert text to show the user on failure.
        """
        if self.is_generating:
            return None
        self.is_generating = True
        self.current_question = None
        self.selected_answer = None
        self.result = None
        try:
            self.current_question = self.api.generate_quiz(topic)
            return None
        except ApiError as e:
            logger.warning("Quiz generation failed: %s", e)
            return f"Lỗi: {str(e) or 'Unknown error'}"
        finally:
            self.is_generating = False

    def check_answer(self, letter: str) -> Optional[str]:
        """
        Grade letter against the current question (once per question).

        Returns None on success or when the action is ignored, or the alert text on failure.
        """
        if self.current_question is None or self.selected_answer is not None or self.is_checking:
            return None
        if letter not in OPTION_LETTERS:
            return f"Lỗi: {letter} không phải là đáp án hợp lệ"

        self.selected_answer = letter
        self.is_checking = True
        try:
            self.result = self.api.check_answer(self.current_question, letter)
            return None
        except ApiError as e:
            logger.warning("Answer check failed: %s", e)
            return f"Lỗi: {str(e) or 'Unknown error'}"
        finally:
            self.is_checking = False
