"""Tests for the terminal client: storage, API wrapper, and view state."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from vnr_chat.client.api import ApiClient, ApiError
from vnr_chat.client.state import ClientState, chat_error_text, format_message
from vnr_chat.client.storage import ChatHistoryStore, LocalStorage
from vnr_chat.models import ChatMessage, QuizQuestion, QuizResult

KEY = "vnr-chat-history"


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "db" / "local_storage.json")


@pytest.fixture
def history(storage) -> ChatHistoryStore:
    return ChatHistoryStore(storage, KEY, version=1)


def make_response(status: int, body) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = body
    return response


class TestLocalStorage:
    """Tests for LocalStorage."""

    def test_set_get_remove(self, storage) -> None:
        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_keys_are_independent(self, storage) -> None:
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        assert storage.get_item("b") == "2"

    def test_corrupt_file_reads_as_empty(self, storage) -> None:
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("{not json", encoding="utf-8")
        assert storage.get_item("k") is None


class TestChatHistoryStore:
    """Tests for ChatHistoryStore."""

    def test_round_trip(self, history) -> None:
        """Test that order and content survive a save and load."""
        messages = [
            ChatMessage(role="user", content="Bác ơi?"),
            ChatMessage(role="assistant", content="Bác xin chào các cháu."),
            ChatMessage(role="user", content="Cảm ơn Bác!"),
        ]
        history.save(messages)
        assert history.load() == messages

    def test_envelope_is_versioned(self, history, storage) -> None:
        history.save([ChatMessage(role="user", content="x")])
        stored = json.loads(storage.get_item(KEY))
        assert stored["version"] == 1
        assert stored["messages"] == [{"role": "user", "content": "x"}]

    def test_other_version_discarded(self, storage) -> None:
        ChatHistoryStore(storage, KEY, version=2).save([ChatMessage(role="user", content="x")])
        assert ChatHistoryStore(storage, KEY, version=1).load() == []

    def test_legacy_bare_array_discarded(self, history, storage) -> None:
        """Test that an unversioned array is dropped rather than misread."""
        storage.set_item(KEY, json.dumps([{"role": "user", "content": "x"}]))
        assert history.load() == []

    def test_clear(self, history) -> None:
        history.save([ChatMessage(role="user", content="x")])
        history.clear()
        assert history.load() == []


class TestApiClient:
    """Tests for ApiClient."""

    def test_chat(self) -> None:
        session = MagicMock()
        session.post.return_value = make_response(200, {"message": "Chào cháu", "success": True})
        api = ApiClient("http://server/", session=session, timeout=5)
        assert api.chat("xin chào") == "Chào cháu"
        session.post.assert_called_once_with("http://server/chat", json={"message": "xin chào"}, timeout=5)

    def test_error_prefers_error_field(self) -> None:
        session = MagicMock()
        session.post.return_value = make_response(401, {"error": "Failed to get response from AI", "details": "key"})
        with pytest.raises(ApiError, match="Failed to get response from AI"):
            ApiClient("http://server", session=session).chat("x")

    def test_error_without_body(self) -> None:
        session = MagicMock()
        response = make_response(502, None)
        response.json.side_effect = ValueError("no json")
        session.post.return_value = response
        with pytest.raises(ApiError, match="HTTP 502"):
            ApiClient("http://server", session=session).chat("x")

    def test_connection_error(self) -> None:
        session = MagicMock()
        session.post.side_effect = requests.exceptions.ConnectionError()
        with pytest.raises(ApiError, match="Cannot connect"):
            ApiClient("http://server", session=session).chat("x")

    def test_generate_quiz(self, valid_quiz) -> None:
        session = MagicMock()
        session.post.return_value = make_response(200, {"success": True, "quiz": valid_quiz})
        question = ApiClient("http://server", session=session).generate_quiz()
        assert question.to_json() == valid_quiz

    def test_generate_quiz_without_quiz(self) -> None:
        session = MagicMock()
        session.post.return_value = make_response(200, {"success": True})
        with pytest.raises(ApiError, match="Invalid response format"):
            ApiClient("http://server", session=session).generate_quiz()

    def test_check_answer_sends_question(self, valid_quiz) -> None:
        session = MagicMock()
        session.post.return_value = make_response(
            200, {"success": True, "isCorrect": False, "correctAnswer": "A", "explanation": "vì"}
        )
        question = QuizQuestion.model_validate(valid_quiz)
        result = ApiClient("http://server", session=session).check_answer(question, "B")
        assert result.is_correct is False
        sent = session.post.call_args.kwargs["json"]
        assert sent == {"action": "check", "selectedAnswer": "B", "question": valid_quiz}


class TestClientState:
    """Tests for ClientState."""

    def test_send_message_persists_both_sides(self, history) -> None:
        api = MagicMock()
        api.chat.return_value = "Bác xin chào các cháu."
        state = ClientState(api, history)
        reply = state.send_message("  Bác ơi?  ")
        assert reply.content == "Bác xin chào các cháu."
        assert [m.role for m in state.messages] == ["user", "assistant"]
        assert state.messages[0].content == "Bác ơi?"
        assert history.load() == state.messages
        assert state.is_loading is False

    def test_send_failure_becomes_assistant_message(self, history) -> None:
        api = MagicMock()
        api.chat.side_effect = ApiError("Failed to get response from AI")
        state = ClientState(api, history)
        reply = state.send_message("hello")
        assert reply.role == "assistant"
        assert reply.content == chat_error_text("Failed to get response from AI")

    def test_blank_or_busy_input_ignored(self, history) -> None:
        api = MagicMock()
        state = ClientState(api, history)
        assert state.send_message("   ") is None
        state.is_loading = True
        assert state.send_message("hello") is None
        api.chat.assert_not_called()
        assert state.messages == []

    def test_hydrate_restores_history(self, history) -> None:
        saved = [ChatMessage(role="user", content="a"), ChatMessage(role="assistant", content="b")]
        history.save(saved)
        state = ClientState(MagicMock(), history)
        state.hydrate()
        assert state.messages == saved

    def test_clear_is_not_resurrected(self, history) -> None:
        """Test that after clearing, a fresh client starts empty."""
        api = MagicMock()
        api.chat.return_value = "ok"
        state = ClientState(api, history)
        state.send_message("hello")
        state.clear_chat()
        assert state.messages == []

        reloaded = ClientState(api, history)
        reloaded.hydrate()
        assert reloaded.messages == []

    def test_generate_and_check(self, history, valid_quiz) -> None:
        api = MagicMock()
        question = QuizQuestion.model_validate(valid_quiz)
        api.generate_quiz.return_value = question
        api.check_answer.return_value = QuizResult(isCorrect=True, correctAnswer="A", explanation="vì")
        state = ClientState(api, history)

        assert state.generate_question() is None
        assert state.current_question == question
        assert state.check_answer("A") is None
        assert state.selected_answer == "A"
        assert state.result.is_correct is True
        assert state.is_checking is False

        # A second answer to the same question is ignored.
        assert state.check_answer("B") is None
        api.check_answer.assert_called_once()

    def test_generate_resets_previous_question(self, history, valid_quiz) -> None:
        api = MagicMock()
        api.generate_quiz.side_effect = ApiError("Failed to process quiz request")
        state = ClientState(api, history)
        state.current_question = QuizQuestion.model_validate(valid_quiz)
        state.selected_answer = "A"
        alert = state.generate_question()
        assert alert == "Lỗi: Failed to process quiz request"
        assert state.current_question is None
        assert state.selected_answer is None
        assert state.is_generating is False

    def test_check_without_question_ignored(self, history) -> None:
        api = MagicMock()
        state = ClientState(api, history)
        assert state.check_answer("A") is None
        api.check_answer.assert_not_called()

    def test_switch_tab(self, history) -> None:
        state = ClientState(MagicMock(), history)
        state.switch_tab("game")
        assert state.active_tab == "game"
        with pytest.raises(ValueError):
            state.switch_tab("settings")


class TestFormatMessage:
    """Tests for format_message."""

    def test_strips_emphasis(self) -> None:
        assert format_message("**Bác** nói *rằng*") == "Bác nói rằng"

    def test_bullets(self) -> None:
        assert format_message("Ý chính:\n* đoàn kết\n* yêu nước") == "Ý chính:\n\n• đoàn kết\n\n• yêu nước"

    def test_collapses_blank_lines(self) -> None:
        assert format_message("a\n\n\n\nb") == "a\n\nb"
