"""
CLIENT PACKAGE
==============

Everything the terminal client needs (chat_client.py is the interactive loop):

  storage - LocalStorage (JSON file) and ChatHistoryStore (versioned history blob).
  api     - ApiClient: requests calls to POST /chat and POST /quiz.
  state   - ClientState: messages, quiz question, busy flags; format_message().
"""
