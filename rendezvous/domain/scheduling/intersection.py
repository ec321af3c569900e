"""
Availability Intersection Engine

Finds the first window both parties are free for at least the minimum
overlap. Pairs are scanned in input order (A outer, B inner) and the first
qualifying pair wins, not the longest one, so results are deterministic.
"""

from typing import Iterable, Optional, Sequence

from ... import config
from .timeslots import TimeSlot


def intersect(
    slots_a: Sequence[TimeSlot],
    slots_b: Iterable[TimeSlot],
    min_overlap_minutes: Optional[int] = None,
) -> Optional[TimeSlot]:
    """
    Return the first common window of at least ``min_overlap_minutes``.

    Args:
        slots_a: first party's slots, outer loop
        slots_b: second party's slots, inner loop
        min_overlap_minutes: policy threshold, defaults to MIN_OVERLAP_MINUTES (30)

    Returns:
        The intersection window ``{date, max(starts), min(ends)}`` or None.
        Windows never have zero length, even with a threshold of 0.
    """
    if min_overlap_minutes is None:
        min_overlap_minutes = config.MIN_OVERLAP_MINUTES

    slots_b = list(slots_b)
    for slot_a in slots_a:
        for slot_b in slots_b:
            window = slot_a.intersection(slot_b)
            if window is not None and window.duration_minutes >= min_overlap_minutes:
                return window
    return None
