"""Image ingestion services: create image notes and replace image content."""

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from .exceptions import NoteNotFoundError
from .filenames import sanitize_filename
from .models import PipelineResult, RevisionSnapshot, SavedImage
from .observability import LogContext
from .options import ImageOptions
from .pipeline import process_image
from .protocols import (
    FilenameSanitizer,
    LoggerProtocol,
    Note,
    NoteRepository,
    OptionStore,
    ProtectedSessionService,
    RevisionService,
)

Clock = Callable[[], datetime]

LABEL_ORIGINAL_FILE_NAME = "originalFileName"
LABEL_FILE_SIZE = "fileSize"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_utc_datetime(moment: datetime) -> str:
    """``2024-01-31 12:00:00.000Z``"""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%d %H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_local_datetime(moment: datetime) -> str:
    """``2024-01-31 13:00:00.000+0100``"""
    local = moment.astimezone()
    return (
        local.strftime("%Y-%m-%d %H:%M:%S.")
        + f"{local.microsecond // 1000:03d}"
        + local.strftime("%z")
    )


def image_mime(result: PipelineResult) -> str:
    return "image/" + result.format.extension.lower()


def image_url(note_id: str, file_name: str) -> str:
    return f"api/images/{note_id}/{file_name}"


class ImageProcessorService:
    """
    Runs the shrink pipeline with options read per upload.

    Options come from ``option_store`` when one is given, otherwise from the
    ``NOTE_IMAGES_*`` environment variables.
    """

    def __init__(self, option_store: Optional[OptionStore] = None):
        self._option_store = option_store

    def load_options(self) -> ImageOptions:
        if self._option_store is None:
            return ImageOptions.from_env()
        return ImageOptions.from_store(self._option_store)

    def process(self, upload: bytes, original_name: str, shrink: bool) -> PipelineResult:
        # Options are read once per upload.
        options = self.load_options()
        return process_image(
            upload,
            original_name,
            shrink,
            options.resize_config(),
            options.optimize_config(),
        )


class ImageService:
    """Creates image attachment notes and replaces the content of image notes."""

    def __init__(
        self,
        repository: NoteRepository,
        revisions: RevisionService,
        protected_session: ProtectedSessionService,
        processor: ImageProcessorService,
        logger: LoggerProtocol,
        sanitizer: FilenameSanitizer = sanitize_filename,
        clock: Optional[Clock] = None,
    ):
        self._repository = repository
        self._revisions = revisions
        self._protected_session = protected_session
        self._processor = processor
        self._logger = logger
        self._sanitizer = sanitizer
        self._clock = clock or _utc_now

    def _get_note(self, note_id: str) -> Note:
        note = self._repository.get_note(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    def save_image(
        self,
        parent_note_id: str,
        upload: bytes,
        original_name: str,
        shrink_image: bool = True,
    ) -> SavedImage:
        """
        Store an upload as a new image note under ``parent_note_id``.

        The new note inherits protection from its parent only while a
        protected session is available.

        Raises:
            UnknownFormatError: If the upload is not a recognizable image.
            DecodeError: If the upload cannot be decoded for shrinking.
            NoteNotFoundError: If the parent note does not exist.
        """
        start_time = time.time()
        context = LogContext(operation="save_image", component="image_service")
        context = context.with_metadata(
            parent_note_id=parent_note_id, original_name=original_name
        )

        result = self._processor.process(upload, original_name, shrink_image)
        file_name = self._sanitizer(original_name)
        parent_note = self._get_note(parent_note_id)

        note = self._repository.create_note(
            parent_note_id,
            file_name,
            result.buffer,
            type="image",
            mime=image_mime(result),
            is_protected=parent_note.is_protected
            and self._protected_session.is_protected_session_available(),
            labels={
                LABEL_ORIGINAL_FILE_NAME: original_name,
                LABEL_FILE_SIZE: result.size,
            },
        )

        self._logger.info(
            "Saved image note",
            context.with_metadata(note_id=note.note_id),
            original_size=len(upload),
            final_size=result.size,
            format=result.format.extension,
            processing_time_ms=round((time.time() - start_time) * 1000),
        )

        return SavedImage(
            file_name=file_name,
            note=note,
            note_id=note.note_id,
            url=image_url(note.note_id, file_name),
        )

    def snapshot(self, note: Note) -> RevisionSnapshot:
        """Capture the note's current metadata for a revision."""
        now = self._clock()
        return RevisionSnapshot(
            note_id=note.note_id,
            title=note.title,
            type=note.type,
            mime=note.mime,
            # aligned with the note by protect_note_revisions()
            is_protected=False,
            utc_date_last_edited=note.utc_date_modified,
            date_last_edited=note.date_modified,
            utc_date_created=format_utc_datetime(now),
            utc_date_modified=format_utc_datetime(now),
            date_created=format_local_datetime(now),
        )

    def update_image(self, note_id: str, upload: bytes, original_name: str) -> Note:
        """
        Replace the content of an image note, keeping its prior state as a revision.

        Raises:
            UnknownFormatError: If the upload is not a recognizable image.
            DecodeError: If the upload cannot be decoded for shrinking.
            NoteNotFoundError: If the note does not exist.
        """
        context = LogContext(
            operation="update_image", component="image_service"
        ).with_metadata(note_id=note_id, original_name=original_name)

        result = self._processor.process(upload, original_name, True)
        note = self._get_note(note_id)

        self._revisions.create_revision(self.snapshot(note), note.get_content())
        self._logger.debug("Captured revision before replacing content", context)

        note.mime = image_mime(result)
        note.set_content(result.buffer)
        note.set_label(LABEL_ORIGINAL_FILE_NAME, original_name)
        note.set_label(LABEL_FILE_SIZE, result.size)

        self._revisions.protect_note_revisions(note)

        self._logger.info(
            "Replaced image content",
            context,
            original_size=len(upload),
            final_size=result.size,
            format=result.format.extension,
        )
        return note
