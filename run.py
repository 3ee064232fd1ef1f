"""
RUN SCRIPT - Start the VNR Chat server
======================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Runs the FastAPI app from vnr_chat.main with uvicorn on host 0.0.0.0.
  - Port comes from PORT (default 8000).
  - reload=True restarts the server when a Python file changes (development).

USAGE:
  python run.py

  API docs: http://localhost:8000/docs

NOTE:
  Set GROQ_API_KEY (and optionally GROQ_MODELS) in .env first. Without a key
  the server stops at startup.
"""

import os

import uvicorn

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "vnr_chat.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True
    )
