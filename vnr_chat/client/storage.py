"""
CLIENT STORAGE MODULE
=====================

The terminal client's equivalent of browser local storage: one small JSON file
per user, holding string values under string keys.

  LocalStorage      - get_item / set_item / remove_item on that file.
  ChatHistoryStore  - the chat history blob under its fixed key, wrapped in a
                      versioned envelope {"version": 1, "messages": [...]}.

Writes overwrite the whole blob (last write wins). Anything unreadable is
logged and treated as "nothing stored", so a corrupt file never blocks the client.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from vnr_chat.models import ChatHistory, ChatMessage


logger = logging.getLogger("VNR")


class LocalStorage:
    """Key/value strings persisted in a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read local storage %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage %s is not a JSON object; ignoring it", self.path)
            return {}
        return data

    def _write_all(self, data: dict) -> None:
        # parents=True creates parent folders; exist_ok=True avoids error if already present.
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class ChatHistoryStore:
    """Saves and restores the message list under one key, with a schema version."""

    def __init__(self, storage: LocalStorage, key: str, version: int = 1):
        self.storage = storage
        self.key = key
        self.version = version

    def load(self) -> List[ChatMessage]:
        """
        Return the stored messages, or [] if nothing usable is stored.

        A blob written with another version is discarded rather than migrated.
        """
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            history = ChatHistory.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable chat history: %s", e.error_count())
            return []
        if history.version != self.version:
            logger.info("Discarding chat history with version %s (expected %s)", history.version, self.version)
            return []
        return list(history.messages)

    def save(self, messages: List[ChatMessage]) -> None:
        history = ChatHistory(version=self.version, messages=list(messages))
        try:
            self.storage.set_item(self.key, history.model_dump_json())
        except OSError as e:
            logger.error("Error saving chat history: %s", e)

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            logger.error("Error clearing chat history: %s", e)
