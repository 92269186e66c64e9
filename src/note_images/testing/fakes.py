"""Fake implementations for testing purposes."""

import io
import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from PIL import Image

from ..core.models import RevisionSnapshot

LabelValue = Union[str, int]


@dataclass
class FakeNote:
    """In-memory note with content and labels."""

    note_id: str
    title: str
    type: str = "image"
    mime: str = "image/png"
    is_protected: bool = False
    parent_note_id: Optional[str] = None
    content: bytes = b""
    labels: Dict[str, LabelValue] = field(default_factory=dict)
    date_modified: Optional[str] = "2024-01-01 10:00:00.000+0100"
    utc_date_modified: Optional[str] = "2024-01-01 09:00:00.000Z"
    events: List[str] = field(default_factory=list)

    def get_content(self) -> bytes:
        self.events.append("get_content")
        return self.content

    def set_content(self, content: bytes) -> None:
        self.events.append("set_content")
        self.content = content

    def set_label(self, name: str, value: LabelValue) -> None:
        self.events.append(f"set_label:{name}")
        self.labels[name] = value


class FakeNoteRepository:
    """In-memory note repository."""

    def __init__(self):
        self.notes: Dict[str, FakeNote] = {}
        self._ids = itertools.count(1)

    def add_note(self, note: FakeNote) -> FakeNote:
        self.notes[note.note_id] = note
        return note

    def get_note(self, note_id: str) -> Optional[FakeNote]:
        return self.notes.get(note_id)

    def create_note(
        self,
        parent_note_id: str,
        title: str,
        content: bytes,
        *,
        type: str,
        mime: str,
        is_protected: bool,
        labels: Dict[str, LabelValue],
    ) -> FakeNote:
        note = FakeNote(
            note_id=f"note{next(self._ids)}",
            title=title,
            type=type,
            mime=mime,
            is_protected=is_protected,
            parent_note_id=parent_note_id,
            content=content,
            labels=dict(labels),
        )
        return self.add_note(note)


class FakeRevisionService:
    """Records revisions and protection alignment calls."""

    def __init__(self):
        self.revisions: List[Tuple[RevisionSnapshot, bytes]] = []
        self.protected_notes: List[str] = []

    def create_revision(self, snapshot: RevisionSnapshot, content: bytes) -> RevisionSnapshot:
        self.revisions.append((snapshot, content))
        return snapshot

    def protect_note_revisions(self, note: Any) -> None:
        self.protected_notes.append(note.note_id)


class FakeProtectedSession:
    def __init__(self, available: bool = False):
        self.available = available

    def is_protected_session_available(self) -> bool:
        return self.available


class FakeLogger:
    """Fake logger for testing with support for LogContext."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(self, level: str, message: str, context: Any = None, **kwargs: Any) -> None:
        log_entry = {
            "level": level,
            "message": message,
            "timestamp": time.time(),
            **kwargs,
        }

        if context is not None:
            if hasattr(context, "correlation_id"):
                log_entry["correlation_id"] = context.correlation_id
            if hasattr(context, "operation"):
                log_entry["operation"] = context.operation
            if hasattr(context, "component"):
                log_entry["component"] = context.component
            if hasattr(context, "metadata"):
                log_entry.update(context.metadata)

        self.logs.append(log_entry)

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("DEBUG", message, context, **kwargs)

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("INFO", message, context, **kwargs)

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("WARNING", message, context, **kwargs)

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("ERROR", message, context, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get logged messages, optionally filtered by level."""
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()

    def clear_logs(self) -> None:
        self.logs.clear()


def create_test_image(
    width: int = 100,
    height: int = 100,
    format: str = "JPEG",
    mode: str = "RGB",
    **save_kwargs: Any,
) -> bytes:
    """Create a patterned test image in memory."""
    color: Any = (200, 30, 30, 255) if mode == "RGBA" else "red"
    image = Image.new(mode, (width, height), color=color)

    # Blue squares on a 20px grid give the encoders something to work with
    square: Any = (0, 0, 255, 255) if mode == "RGBA" else "blue"
    for x in range(0, width, 20):
        for y in range(0, height, 20):
            if (x + y) % 40 == 0:
                image.paste(square, (x, y, min(x + 10, width), min(y + 10, height)))

    if format == "JPEG" and "quality" not in save_kwargs:
        save_kwargs["quality"] = 95

    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format, **save_kwargs)
    return img_bytes.getvalue()


def create_noisy_image(width: int, height: int, format: str = "JPEG", **save_kwargs: Any) -> bytes:
    """Create an image of random noise, which compresses poorly."""
    image = Image.effect_noise((width, height), 80).convert("RGB")
    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format, **save_kwargs)
    return img_bytes.getvalue()


def create_transparent_png(width: int = 40, height: int = 30) -> bytes:
    """Fully transparent RGBA PNG."""
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    img_bytes = io.BytesIO()
    image.save(img_bytes, format="PNG")
    return img_bytes.getvalue()


def setup_test_notes() -> FakeNoteRepository:
    """A repository with a plain parent, a protected parent and an image note."""
    repository = FakeNoteRepository()
    repository.add_note(FakeNote(note_id="root", title="root", type="text", mime="text/html"))
    repository.add_note(
        FakeNote(
            note_id="secret",
            title="secret",
            type="text",
            mime="text/html",
            is_protected=True,
        )
    )
    repository.add_note(
        FakeNote(
            note_id="image1",
            title="diagram.png",
            mime="image/png",
            parent_note_id="root",
            content=create_test_image(60, 40, format="PNG"),
            labels={"originalFileName": "diagram.png"},
        )
    )
    return repository
