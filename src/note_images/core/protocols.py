"""Protocol definitions for the collaborators of the image services."""

from typing import Any, Dict, Optional, Protocol, Union

from .models import RevisionSnapshot

LabelValue = Union[str, int]


class OptionStore(Protocol):
    """Read-only access to the host's option values."""

    def get_option(self, name: str) -> Optional[str]:
        """Return the raw option value, or None when unset."""
        ...


class Note(Protocol):
    """The subset of a note the image services read and write."""

    note_id: str
    title: str
    type: str
    mime: str
    is_protected: bool
    date_modified: Optional[str]
    utc_date_modified: Optional[str]

    def get_content(self) -> bytes:
        ...

    def set_content(self, content: bytes) -> None:
        ...

    def set_label(self, name: str, value: LabelValue) -> None:
        ...


class NoteRepository(Protocol):
    """Persistence of notes."""

    def get_note(self, note_id: str) -> Optional[Note]:
        """Return the note or None when it does not exist."""
        ...

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
    ) -> Note:
        """Create a child note of ``parent_note_id``."""
        ...


class RevisionService(Protocol):
    """Revision history of notes."""

    def create_revision(self, snapshot: RevisionSnapshot, content: bytes) -> Any:
        """Store an immutable revision of a note's prior state."""
        ...

    def protect_note_revisions(self, note: Note) -> None:
        """Align the protection flag of the note's revisions with the note."""
        ...


class ProtectedSessionService(Protocol):
    def is_protected_session_available(self) -> bool:
        ...


class FilenameSanitizer(Protocol):
    def __call__(self, name: str) -> str:
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...
