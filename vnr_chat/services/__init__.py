"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (vnr_chat.main) calls these services;
they don't handle HTTP, only prompts, model calls, and quiz data.

MODULES:
    prompts        - Prompt Builder: persona and quiz prompt strings.
    model_invoker  - ModelInvoker: ChatGroq calls with timeout and model-name fallback.
    extractor      - Reply parsing: chat text, quiz JSON, fallback question.
    grader         - grade(question, letter).
    chat_service   - ChatService: prompt -> invoker -> chat text.
    quiz_service   - QuizService: generate (with fallback) and check.
"""
