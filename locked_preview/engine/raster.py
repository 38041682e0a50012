# locked_preview/engine/raster.py

"""Pixel buffer type and the pure stages of the blurred preview pipeline.

Each stage takes explicit buffers and returns a new one; nothing is drawn
onto a shared surface. Buffers hold straight (non-premultiplied) RGBA as
``uint8`` arrays of shape ``(height, width, 4)``.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image, ImageFilter

from locked_preview.core.definitions import HIGHLIGHT_FALLOFF, MASK_BOUNDARY_OPACITY
from locked_preview.core.domain import BlurBands, BlurParameters, clamp_ratio
from locked_preview.core.exceptions import ValidationError

_EPSILON = 1e-12


@dataclass(frozen=True)
class RasterBuffer:
    """Immutable RGBA pixel grid."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValidationError(
                f"Expected an RGBA pixel array, got shape {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValidationError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        self.pixels.setflags(write=False)

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterBuffer":
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels, copy=True))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_bands(height: int, params: BlurParameters) -> BlurBands:
    """Splits ``height`` rows into sharp, fading and blurred bands.

    Ratios are clamped into [0, 1] first, so out-of-range values behave
    like the nearest bound.
    """
    blur_start_y = _round_half_up(height * params.clamped_visible_ratio())
    fade_height = max(_round_half_up(height * params.clamped_fade_ratio()), 1)
    gradient_start_y = max(blur_start_y - fade_height, 0)

    return BlurBands(
        height=height,
        blur_start_y=blur_start_y,
        fade_height=fade_height,
        gradient_start_y=gradient_start_y,
    )


def _row_positions(bands: BlurBands) -> Tuple[int, np.ndarray]:
    """Relative position of each row centre within ``[gradient_start_y, height)``."""
    start = bands.gradient_start_y
    span = max(bands.height - start, 1)
    rows = np.arange(start, bands.height, dtype=np.float64)
    return start, (rows + 0.5 - start) / span


def blur_buffer(buffer: RasterBuffer, radius: float) -> RasterBuffer:
    """Gaussian-blurs the whole buffer.

    Blurring happens in premultiplied alpha so transparent pixels do not
    darken their neighbours.

    Raises:
        ValidationError: If the radius is not positive.
    """
    if not radius or radius <= 0:
        raise ValidationError(f"Blur radius must be positive, got {radius}")

    blurred = (
        buffer.to_image()
        .convert("RGBa")
        .filter(ImageFilter.GaussianBlur(radius=radius))
        .convert("RGBA")
    )
    return RasterBuffer.from_image(blurred)


def ramp(t: np.ndarray, relative_start: float) -> np.ndarray:
    """Evaluates the three-stop opacity curve at positions ``t``.

    Stops are (0, 0), (relative_start, boundary opacity) and (1, 1). When
    two stops share an offset, positions past it take the later stop.
    """
    peak = MASK_BOUNDARY_OPACITY
    rising = peak * t / max(relative_start, _EPSILON)
    falling = peak + (1.0 - peak) * (t - relative_start) / max(
        1.0 - relative_start, _EPSILON
    )
    values = np.where(t <= relative_start, rising, falling)
    return np.clip(values, 0.0, 1.0)


def build_gradient_mask(bands: BlurBands) -> np.ndarray:
    """Per-row opacity of the blurred layer, shape ``(height,)``.

    Rows above ``gradient_start_y`` are 0 and the ramp is non-decreasing
    from there to the last row.
    """
    mask = np.zeros(bands.height, dtype=np.float64)
    start, t = _row_positions(bands)
    if t.size:
        mask[start:] = ramp(t, bands.relative_start)
    return mask


def _source_over(
    dst: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray
) -> np.ndarray:
    """Porter-Duff source-over in straight alpha, all inputs in [0, 1]."""
    dst_rgb = dst[..., :3]
    dst_alpha = dst[..., 3]

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    numerator = (
        src_rgb * src_alpha[..., None]
        + dst_rgb * (dst_alpha * (1.0 - src_alpha))[..., None]
    )
    out_rgb = np.divide(
        numerator,
        out_alpha[..., None],
        out=np.zeros_like(numerator),
        where=out_alpha[..., None] > 0,
    )
    return np.concatenate([out_rgb, out_alpha[..., None]], axis=-1)


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values * 255.0), 0, 255).astype(np.uint8)


def composite_masked(
    base: RasterBuffer, overlay: RasterBuffer, mask: np.ndarray
) -> RasterBuffer:
    """Draws ``overlay`` over ``base`` with its alpha scaled per row by ``mask``.

    Rows where the mask is 0 are copied from ``base`` unchanged.
    """
    if base.pixels.shape != overlay.pixels.shape:
        raise ValidationError("Base and overlay buffers must have the same size")
    if mask.shape != (base.height,):
        raise ValidationError("Mask must have one value per row")

    active = np.nonzero(mask > 0)[0]
    if active.size == 0:
        return base

    start = int(active[0])
    dst = base.pixels[start:].astype(np.float64) / 255.0
    src = overlay.pixels[start:].astype(np.float64) / 255.0
    src_alpha = src[..., 3] * mask[start:, None]

    result = np.array(base.pixels, copy=True)
    result[start:] = _to_uint8(_source_over(dst, src[..., :3], src_alpha))
    return RasterBuffer(result)


def apply_highlight(
    buffer: RasterBuffer, bands: BlurBands, opacity: float
) -> RasterBuffer:
    """Overlays a white vertical gradient from ``gradient_start_y`` down.

    The tint runs from ``opacity - 0.2`` (floored at 0) at the top of the
    band to ``opacity`` at the bottom edge. Non-positive opacity is a no-op.
    """
    if opacity <= 0:
        return buffer

    high = clamp_ratio(opacity)
    low = max(high - HIGHLIGHT_FALLOFF, 0.0)
    start, t = _row_positions(bands)
    if not t.size:
        return buffer

    alpha = np.broadcast_to((low + (high - low) * t)[:, None], (t.size, buffer.width))
    dst = buffer.pixels[start:].astype(np.float64) / 255.0
    white = np.ones_like(dst[..., :3])

    result = np.array(buffer.pixels, copy=True)
    result[start:] = _to_uint8(_source_over(dst, white, alpha))
    return RasterBuffer(result)
