"""
VNR CHAT TERMINAL CLIENT
========================

PURPOSE:
A command-line front-end for the VNR Chat API with two tabs: persona chat and
the history quiz. The conversation is kept in a local storage file and restored
the next time the client starts.

USAGE:
    python chat_client.py

    Make sure the server is running first: python run.py

COMMANDS:
    /chat           - Switch to the chat tab
    /game           - Switch to the quiz tab
    /new [topic]    - (quiz tab) Generate a new question, optionally on a topic
    A, B, C, D      - (quiz tab) Answer the current question
    /history        - Show the stored conversation
    /clear          - Delete the conversation (memory and local storage)
    /quit or /exit  - Exit
"""

from config import (
    API_BASE_URL,
    CHAT_HISTORY_KEY,
    CHAT_HISTORY_VERSION,
    CLIENT_REQUEST_TIMEOUT,
    CLIENT_STORAGE_PATH,
)
from vnr_chat.client.api import ApiClient
from vnr_chat.client.state import ClientState, format_message
from vnr_chat.client.storage import ChatHistoryStore, LocalStorage
from vnr_chat.models import OPTION_LETTERS


ASSISTANT_NAME = "Chủ tịch Hồ Chí Minh"


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "=" * 60)
    print("💬 Lịch Sử Đảng Cộng Sản Việt Nam")
    print("=" * 60)
    print("\nTabs:")
    print("  /chat = Trò chuyện")
    print("  /game = Trắc nghiệm (/new để tạo câu hỏi, A-D để trả lời)")
    print("\nCommands:")
    print("  /history - See chat history")
    print("  /clear - Delete chat history")
    print("  /quit - Exit")
    print("=" * 60 + "\n")


def get_user_input(prompt: str):
    """Get one line of input, or None on Ctrl+C / Ctrl+D."""
    try:
        return input(prompt).strip()
    except (KeyboardInterrupt, EOFError):
        return None


def render_history(state: ClientState) -> str:
    if not state.messages:
        return "No messages yet"
    output = f"\n📜 Chat History ({len(state.messages)} messages):\n"
    output += "-" * 60 + "\n"
    for i, msg in enumerate(state.messages, 1):
        role = "You" if msg.role == "user" else ASSISTANT_NAME
        output += f"{i}. {role}: {format_message(msg.content)}\n"
    output += "-" * 60 + "\n"
    return output


def render_question(state: ClientState) -> str:
    question = state.current_question
    lines = [f"\n❓ {question.question}"]
    for letter in OPTION_LETTERS:
        lines.append(f"  {letter}. {getattr(question.options, letter)}")
    return "\n".join(lines)


def render_result(state: ClientState) -> str:
    result = state.result
    verdict = "✅ Chính xác!" if result.is_correct else f"❌ Chưa đúng. Đáp án đúng: {result.correct_answer}"
    return f"{verdict}\n💡 {result.explanation}"


# -----------------------------------------------------------------------------
# COMMAND HANDLING
# -----------------------------------------------------------------------------

def handle_quiz_input(state: ClientState, user_input: str) -> None:
    if user_input.startswith("/new"):
        topic = user_input[len("/new"):].strip() or None
        print("⏳ Đang tạo câu hỏi...")
        alert = state.generate_question(topic)
        print(alert if alert else render_question(state))
        return

    letter = user_input.upper()
    if letter in OPTION_LETTERS:
        if state.current_question is None:
            print("❌ No question yet. Type /new to generate one.")
            return
        if state.selected_answer is not None:
            print("❌ Already answered. Type /new for the next question.")
            return
        alert = state.check_answer(letter)
        print(alert if alert else render_result(state))
        return

    print("❌ Type /new for a question or A, B, C, D to answer.")


def build_state() -> ClientState:
    api = ApiClient(API_BASE_URL, timeout=CLIENT_REQUEST_TIMEOUT)
    history = ChatHistoryStore(LocalStorage(CLIENT_STORAGE_PATH), CHAT_HISTORY_KEY, CHAT_HISTORY_VERSION)
    state = ClientState(api, history)
    state.hydrate()
    return state


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    print_header()
    state = build_state()
    if state.messages:
        print(f"💡 Restored {len(state.messages)} message(s). Type /history to see them.\n")
    else:
        print("👋 Chào mừng bạn đến với Hệ thống Học tập Lịch sử Đảng!\n")

    while True:
        prompt = "\nYou: " if state.active_tab == "chat" else "\nQuiz: "
        user_input = get_user_input(prompt)
        if user_input is None or user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break
        if not user_input:
            continue

        if user_input == "/chat":
            state.switch_tab("chat")
            print("✅ Switched to CHAT")
            continue
        if user_input == "/game":
            state.switch_tab("game")
            print("✅ Switched to QUIZ. Type /new for a question.")
            continue
        if user_input == "/history":
            print(render_history(state))
            continue
        if user_input == "/clear":
            state.clear_chat()
            print("\n🔄 Chat history cleared.")
            continue

        if state.active_tab == "game":
            handle_quiz_input(state, user_input)
            continue

        if user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
            continue

        print(f"🤖 {ASSISTANT_NAME}: ", end="", flush=True)
        reply = state.send_message(user_input)
        if reply is not None:
            print(format_message(reply.content))


# Run the interactive loop when this file is executed (python chat_client.py).
if __name__ == "__main__":
    main()
