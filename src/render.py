"""Presentation of command results as text or JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Structured outcome of one command.

    ``lines`` is the human-readable rendering, ``data`` the machine-readable
    payload. Failed results carry ``error`` and are still a normal return
    value: reporting them is the caller's job.
    """
    command: str
    ok: bool = True
    data: Any = None
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failure(cls, command: str, error: str, data: Any = None) -> "CommandResult":
        return cls(command=command, ok=False, data=data, error=error)

    def to_dict(self) -> dict:
        return {"command": self.command, "ok": self.ok, "data": self.data, "error": self.error}


def render_text(result: CommandResult) -> str:
    return "\n".join(result.lines)


def render_json(result: CommandResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=4)


def render(result: CommandResult, as_json: bool = False) -> str:
    return render_json(result) if as_json else render_text(result)


def save_output(path: str, text: str) -> None:
    """Persist a copy of rendered output (replaces capturing console output)."""
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
        if text and not text.endswith("\n"):
            fh.write("\n")
    logger.debug("Saved rendered output to %s", path)
