"""
VNR CHAT APPLICATION PACKAGE
============================

Backend and terminal client for studying the history of the Communist Party
of Vietnam: persona chat and a multiple-choice quiz, both answered by an LLM.

FILE STRUCTURE:
  vnr_chat/
    __init__.py   - This file.
    main.py       - FastAPI app and the HTTP endpoints (/chat, /quiz, /health).
    models.py     - Pydantic models for requests, responses, quiz questions, history.
    errors.py     - Exception types, fatal-error test, HTTP status mapping.
    services/     - Prompts, model invoker, reply extraction, grading, chat/quiz services.
    utils/        - Model-name fallback loop.
    client/       - Terminal client: local storage, API calls, view state.
"""
