"""Factory classes for creating configured service instances."""

from typing import Optional

from .filenames import sanitize_filename
from .observability import StructuredLogger
from .protocols import (
    FilenameSanitizer,
    LoggerProtocol,
    NoteRepository,
    OptionStore,
    ProtectedSessionService,
    RevisionService,
)
from .services import ImageProcessorService, ImageService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: Optional[str] = None) -> LoggerProtocol:
        """Create a structured logger writing through the package handler."""
        return StructuredLogger(name, level)


class ImageServiceFactory:
    """Factory wiring the image services to their collaborators."""

    @staticmethod
    def create_processor(option_store: Optional[OptionStore] = None) -> ImageProcessorService:
        """Processor reading ``option_store``, or the environment when it is omitted."""
        return ImageProcessorService(option_store)

    @staticmethod
    def create_service(
        repository: NoteRepository,
        revisions: RevisionService,
        protected_session: ProtectedSessionService,
        option_store: Optional[OptionStore] = None,
        logger: Optional[LoggerProtocol] = None,
        sanitizer: FilenameSanitizer = sanitize_filename,
    ) -> ImageService:
        """Create an ImageService; options default to the environment."""
        if logger is None:
            logger = LoggerFactory.create_logger("note-images.service")

        return ImageService(
            repository=repository,
            revisions=revisions,
            protected_session=protected_session,
            processor=ImageServiceFactory.create_processor(option_store),
            logger=logger,
            sanitizer=sanitizer,
        )
