# locked_preview/engine/image_redactor.py

"""Image engine: decode, blur the lower band, tint, encode."""

import base64
import binascii
import io
import logging
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from locked_preview.core.domain import BlurParameters, LockedImage
from locked_preview.core.exceptions import (
    ImageDecodeError,
    PipelineError,
    ValidationError,
)
from locked_preview.engine.raster import (
    RasterBuffer,
    apply_highlight,
    blur_buffer,
    build_gradient_mask,
    compute_bands,
    composite_masked,
)

logger = logging.getLogger(__name__)

ImageSource = Union[str, bytes, Image.Image]

DATA_URL_PREFIX = "data:"
PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def decode_data_url(data_url: str) -> bytes:
    """Extracts the payload of a base64 ``data:`` URL.

    Raises:
        ImageDecodeError: If the URL is not base64 encoded or is corrupt.
    """
    header, separator, payload = data_url.partition(",")
    if not separator or not header.startswith(DATA_URL_PREFIX):
        raise ImageDecodeError("Malformed data URL")
    if not header.endswith(";base64"):
        raise ImageDecodeError("Only base64 data URLs are supported")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e


def decode_image(source: ImageSource) -> Image.Image:
    """Decodes any supported source form into a loaded Pillow image.

    Raises:
        ImageDecodeError: If the source cannot be decoded.
    """
    if isinstance(source, Image.Image):
        return source

    if isinstance(source, str):
        raw = decode_data_url(source)
    elif isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    else:
        raise ImageDecodeError(f"Unsupported image source: {type(source).__name__}")

    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (
        UnidentifiedImageError,
        OSError,
        ValueError,
        Image.DecompressionBombError,
    ) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    return image


def encode_png(image: Image.Image) -> bytes:
    """Encodes an image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_url(png_bytes: bytes) -> str:
    """Wraps PNG bytes in a base64 data URL."""
    return PNG_DATA_URL_PREFIX + base64.b64encode(png_bytes).decode("ascii")


class ImageRedactor:
    """Builds the partially blurred preview of an image.

    The top band stays sharp, the band below fades into a blurred copy,
    and a white tint lightens the obscured area.
    """

    def __init__(self, max_pixels: Optional[int] = None) -> None:
        self.max_pixels = max_pixels

    def _validate(self, image: Image.Image, params: BlurParameters) -> None:
        """Rejects inputs the stages cannot process.

        Raises:
            ValidationError: On a bad radius, an empty or oversized image.
        """
        if not params.blur_radius or params.blur_radius <= 0:
            raise ValidationError(
                f"Blur radius must be positive, got {params.blur_radius}"
            )

        width, height = image.size
        if width <= 0 or height <= 0:
            raise ValidationError(f"Image has no pixels: {width}x{height}")

        if self.max_pixels and width * height > self.max_pixels:
            raise ValidationError(
                f"Image too large: {width}x{height} exceeds {self.max_pixels} pixels"
            )

    def redact(self, source: ImageSource, params: BlurParameters) -> LockedImage:
        """Runs the full pipeline on one image.

        Args:
            source: Data URL, encoded bytes, or a Pillow image
            params: Blur parameters; ratios are clamped, radius must be positive

        Returns:
            LockedImage holding the composited image and the bands used

        Raises:
            ImageDecodeError: If the source cannot be decoded.
            ValidationError: If the parameters or image size are invalid.
            PipelineError: If a processing stage fails.
        """
        image = decode_image(source)
        self._validate(image, params)

        try:
            original = RasterBuffer.from_image(image)
            bands = compute_bands(original.height, params)

            blurred = blur_buffer(original, params.blur_radius)
            mask = build_gradient_mask(bands)
            composited = composite_masked(original, blurred, mask)
            highlighted = apply_highlight(composited, bands, params.highlight_opacity)

            logger.info(
                "Image redacted",
                extra={
                    "width": original.width,
                    "height": original.height,
                    "blur_start_y": bands.blur_start_y,
                    "gradient_start_y": bands.gradient_start_y,
                    "blur_radius": params.blur_radius,
                },
            )

            return LockedImage(image=highlighted.to_image(), bands=bands)

        except ValidationError:
            raise
        except Exception as e:
            logger.error(
                "Image redaction failed",
                exc_info=True,
                extra={"width": image.width, "height": image.height},
            )
            raise PipelineError(f"Failed to redact image: {e}") from e
