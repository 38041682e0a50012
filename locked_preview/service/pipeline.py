# locked_preview/service/pipeline.py

"""Main locked preview service pipeline."""

import copy
import logging
import threading
from typing import Any, Dict, Optional

from PIL import Image

from locked_preview.core.definitions import EMPTY_LOCKED_RECORD
from locked_preview.core.domain import BlurParameters
from locked_preview.core.exceptions import (
    ConfigurationError,
    InitializationError,
    PipelineError,
    ValidationError,
)
from locked_preview.core.loader import PlaceholderLoader
from locked_preview.engine.image_redactor import (
    ImageRedactor,
    ImageSource,
    encode_png,
    to_data_url,
)
from locked_preview.engine.record_redactor import RecordRedactor
from locked_preview.service.config import settings

logger = logging.getLogger(__name__)


class PreviewService:
    """Singleton holder for the image and record engines.

    Manages engine lifecycle and provides thread-safe access to them.
    """

    _image_redactor: Optional[ImageRedactor] = None
    _record_redactor: Optional[RecordRedactor] = None
    _lock = threading.Lock()

    @classmethod
    def get_image_redactor(cls) -> ImageRedactor:
        """Returns the shared image engine."""
        if cls._image_redactor is None:
            with cls._lock:
                if cls._image_redactor is None:
                    cls._image_redactor = ImageRedactor(
                        max_pixels=settings.max_image_pixels
                    )
        return cls._image_redactor

    @classmethod
    def get_record_redactor(cls) -> RecordRedactor:
        """Returns the shared record engine.

        Raises:
            InitializationError: If the replacement table cannot be loaded
        """
        if cls._record_redactor is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._record_redactor is None:
                    try:
                        logger.info("Initializing record redactor")
                        loader = PlaceholderLoader.get_instance(
                            settings.placeholder_table
                        )
                        cls._record_redactor = RecordRedactor(loader)
                        logger.info("Record redactor initialized successfully")

                    except Exception as e:
                        logger.error(
                            "Failed to initialize record redactor", exc_info=True
                        )
                        raise InitializationError(
                            "Record redactor initialization failed"
                        ) from e

        return cls._record_redactor

    @classmethod
    def reset(cls) -> None:
        """Drops both engines so the next call rebuilds them."""
        with cls._lock:
            cls._image_redactor = None
            cls._record_redactor = None
        PlaceholderLoader.reset_instance()


def _encode_like(source: ImageSource, image: Image.Image) -> ImageSource:
    """Encodes the result in the same form the source was given in."""
    if isinstance(source, Image.Image):
        return image
    png_bytes = encode_png(image)
    if isinstance(source, str):
        return to_data_url(png_bytes)
    return png_bytes


def lock_image(
    source: ImageSource, params: Optional[BlurParameters] = None
) -> ImageSource:
    """Main entry point for image previews.

    Args:
        source: Data URL, encoded image bytes, or a Pillow image
        params: Blur parameters, defaults built from settings

    Returns:
        The locked preview as a PNG data URL, PNG bytes or image, matching
        the form of ``source``. On any failure, ``source`` unchanged.
    """
    if not source:
        logger.warning("Empty image provided for locked preview")
        return source

    params = params or settings.blur_parameters()

    try:
        engine = PreviewService.get_image_redactor()
        locked = engine.redact(source, params)
        return _encode_like(source, locked.image)

    except (InitializationError, PipelineError, ValidationError) as e:
        # Known errors: the preview is cosmetic, serve the original instead
        logger.error(
            f"Known error during image preview: {type(e).__name__}",
            exc_info=True,
            extra={"source_type": type(source).__name__, "status": "fallback"},
        )
        return source

    except Exception:
        # Catch-all for unexpected bugs
        logger.error(
            "Unexpected critical error in image preview pipeline",
            exc_info=True,
            extra={"source_type": type(source).__name__, "status": "fallback"},
        )
        return source


def lock_record(record: Any) -> Dict[str, Any]:
    """Main entry point for record previews.

    Args:
        record: Nested source record; non-mappings are treated as empty

    Returns:
        A new locked record with the same shape as ``record``. If the
        replacement table is unavailable, or the record cannot be walked
        (too deeply nested or cyclic), the empty locked record instead.
    """
    try:
        return PreviewService.get_record_redactor().redact(record)

    except (InitializationError, ConfigurationError) as e:
        logger.error(
            f"Known error during record preview: {type(e).__name__}",
            exc_info=True,
            extra={"status": "fallback"},
        )

    except RecursionError:
        logger.error(
            "Record nesting too deep for record preview",
            extra={"record_type": type(record).__name__, "status": "fallback"},
        )

    except Exception:
        logger.error(
            "Unexpected critical error in record preview pipeline",
            exc_info=True,
            extra={"status": "fallback"},
        )

    return copy.deepcopy(EMPTY_LOCKED_RECORD)
