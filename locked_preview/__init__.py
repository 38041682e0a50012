# locked_preview/__init__.py

"""Locked preview generation for paywalled resources.

Exposes the two fail-soft entry points used by callers assembling a
locked preview response.
"""

from locked_preview.service.pipeline import lock_image, lock_record

__all__ = ["lock_image", "lock_record"]
