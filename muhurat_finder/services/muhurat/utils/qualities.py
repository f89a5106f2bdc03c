from __future__ import annotations

from typing import Tuple

from muhurat_finder.services.astrology.astrology_engine import is_rikta_tithi
from muhurat_finder.services.muhurat.config.settings import (
    ABHIJIT_ORDINAL,
    ABHIJIT_WEAK_WEEKDAYS,
    AUSPICIOUS,
    INAUSPICIOUS,
    MUHURTA_BASE_QUALITY,
    NEUTRAL,
    QUALITY_LEVELS,
)


def downgrade(quality: str) -> str:
    idx = QUALITY_LEVELS.index(quality)
    return QUALITY_LEVELS[max(idx - 1, 0)]


def muhurta_quality(
    ordinal: int,
    weekday: int,
    tithi_number: int,
    in_rahu_kalam: bool,
) -> Tuple[str, str]:
    """
    Quality label of a daytime muhurta and the rule that decided it.

    Rules, first match wins:
      rahu_kalam   overlapping Rahu Kalam is Inauspicious
      abhijit      the 8th muhurta is Auspicious, Neutral on Wednesdays
      rikta_tithi  base nature downgraded one step on rikta tithis and Amavasya
      base_nature  fixed nature of the muhurta
    """
    if not 1 <= ordinal <= len(MUHURTA_BASE_QUALITY):
        raise ValueError(f"muhurta ordinal must be 1-15, got {ordinal}")

    if in_rahu_kalam:
        return INAUSPICIOUS, "rahu_kalam"

    if ordinal == ABHIJIT_ORDINAL:
        if weekday in ABHIJIT_WEAK_WEEKDAYS:
            return NEUTRAL, "abhijit"
        return AUSPICIOUS, "abhijit"

    base = MUHURTA_BASE_QUALITY[ordinal]
    if is_rikta_tithi(tithi_number) or tithi_number == 30:
        return downgrade(base), "rikta_tithi"
    return base, "base_nature"
