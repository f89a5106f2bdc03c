import datetime
from typing import Tuple

from muhurat_finder.services.muhurat.config.settings import RAHU_KALAM_PART


def rahu_kalam_window(
    sunrise: datetime.datetime, sunset: datetime.datetime, weekday: int
) -> Tuple[datetime.datetime, datetime.datetime]:
    """Rahu Kalam is one eighth of daylight; which eighth depends on the weekday."""
    part = RAHU_KALAM_PART[weekday]
    eighth = (sunset - sunrise) / 8
    start = sunrise + eighth * (part - 1)
    end = sunset if part == 8 else sunrise + eighth * part
    return start, end


def overlaps(
    start: datetime.datetime,
    end: datetime.datetime,
    window: Tuple[datetime.datetime, datetime.datetime],
) -> bool:
    w_start, w_end = window
    return start < w_end and w_start < end
