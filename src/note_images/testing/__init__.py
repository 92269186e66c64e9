"""Testing utilities and fakes for note image ingestion."""

from .fakes import (
    FakeLogger,
    FakeNote,
    FakeNoteRepository,
    FakeProtectedSession,
    FakeRevisionService,
    create_noisy_image,
    create_test_image,
    create_transparent_png,
    setup_test_notes,
)

__all__ = [
    "FakeLogger",
    "FakeNote",
    "FakeNoteRepository",
    "FakeProtectedSession",
    "FakeRevisionService",
    "create_noisy_image",
    "create_test_image",
    "create_transparent_png",
    "setup_test_notes",
]
