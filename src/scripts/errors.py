from __future__ import annotations

"""Errors raised by editor actions for conditions the user should see."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class EditorActionError(ValueError):
    """Raised when an action cannot run on the current editor state."""

    script: str
    detail: str
    message: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error_type": "EditorActionError",
            "script": self.script,
            "detail": self.detail,
            "message": self.message,
        }

    def __str__(self) -> str:
        return self.message
