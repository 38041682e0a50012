# locked_preview/core/domain.py

"""Domain models for locked preview generation."""

from dataclasses import dataclass
from typing import Any, Optional

from PIL import Image


def clamp_ratio(value: float) -> float:
    """Clamps a ratio into [0, 1]."""
    return min(max(float(value), 0.0), 1.0)


@dataclass(frozen=True)
class BlurParameters:
    """Tuning knobs for the partially blurred preview image.

    Attributes:
        blur_radius: Gaussian blur radius in pixels (must be positive)
        visible_ratio: Fraction of the height kept sharp at the top
        fade_ratio: Fraction of the height used for the transition band
        highlight_opacity: Opacity of the white tint at the bottom edge
    """

    blur_radius: float = 12.0
    visible_ratio: float = 0.4
    fade_ratio: float = 0.25
    highlight_opacity: float = 0.35

    def clamped_visible_ratio(self) -> float:
        return clamp_ratio(self.visible_ratio)

    def clamped_fade_ratio(self) -> float:
        return clamp_ratio(self.fade_ratio)


@dataclass(frozen=True)
class BlurBands:
    """Row positions that split an image into sharp, fading and blurred bands.

    Attributes:
        height: Image height in rows
        blur_start_y: First row of the nominal blurred band
        fade_height: Height of the transition band (at least 1)
        gradient_start_y: First row touched by the mask
    """

    height: int
    blur_start_y: int
    fade_height: int
    gradient_start_y: int

    @property
    def relative_start(self) -> float:
        """Position of ``blur_start_y`` within ``[gradient_start_y, height)``."""
        if self.blur_start_y >= self.height:
            return 1.0
        span = max(self.height - self.gradient_start_y, 1)
        return clamp_ratio((self.blur_start_y - self.gradient_start_y) / span)


@dataclass(frozen=True)
class ReplacementRule:
    """A single entry of the role table.

    Attributes:
        role: Semantic role name
        kind: One of ``RuleKind``
        value: Placeholder or fixed value, if the kind uses one
        schema: Schema name for nested kinds
    """

    role: str
    kind: str
    value: Any = None
    schema: Optional[str] = None


@dataclass
class LockedImage:
    """Result of the image engine.

    Attributes:
        image: Composited RGBA image, same size as the source
        bands: Band positions used for this image
    """

    image: Image.Image
    bands: BlurBands
