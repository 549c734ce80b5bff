"""Host-side intersection records and hit selection."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class Intersection:
    """A ray/shape intersection.

    Intersections order by ``t`` only. ``shape_id`` is an index into the
    owning World's shape list, not a reference to the shape itself.

    Attributes:
        t: Ray parameter of the intersection. May be negative (behind the
            ray origin).
        shape_id: Index of the intersected shape in its World.
    """

    t: float
    shape_id: int = field(compare=False)


def intersections(*items: Intersection) -> list[Intersection]:
    """Collect intersections into a list sorted by ascending t."""
    return sorted(items)


def hit(xs: Iterable[Intersection]) -> Intersection | None:
    """Return the visible intersection: the smallest non-negative t.

    Args:
        xs: Intersections in any order.

    Returns:
        The hit, or None when the list is empty or every t is negative.
    """
    candidates = [x for x in xs if x.t >= 0.0]
    if not candidates:
        return None
    return min(candidates)
