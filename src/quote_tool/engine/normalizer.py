"""
Shipping size-mix normalization.

Percentages coming from form controls rarely add up to exactly 100. A mix
within half a point of 100 is rescaled; anything further off passes through
untouched so that materially wrong data stays visible.
"""
from typing import Optional

from .models import SizeMix, NormalizedMix, TOLERANCE_LOW, TOLERANCE_HIGH


def normalize_shipping_mix(mix: SizeMix) -> NormalizedMix:
    """Rescale a near-100% mix to exactly 100%."""
    total = mix.total

    if TOLERANCE_LOW <= total <= TOLERANCE_HIGH and total != 100:
        factor = 100 / total
        return NormalizedMix(
            small=mix.small * factor,
            medium=mix.medium * factor,
            large=mix.large * factor,
            was_normalized=True,
            original_total=total,
        )

    return NormalizedMix(
        small=mix.small,
        medium=mix.medium,
        large=mix.large,
        was_normalized=False,
        original_total=total,
    )


def mix_advisory(normalized: NormalizedMix) -> Optional[str]:
    """Non-fatal hint describing what happened to the mix, if anything."""
    total = normalized.original_total
    if normalized.was_normalized:
        return f"Shipping percentages auto-normalized from {total:.1f}% to 100%"
    if not normalized.in_tolerance:
        return f"Shipping percentages total {total:.1f}% (should be 100%)"
    return None
