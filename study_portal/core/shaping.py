"""Response shaping helpers shared by schemas and services"""

from typing import Iterable, Optional, Tuple


def bigint_to_str(value: Optional[int]) -> Optional[str]:
    """Serialize a 64-bit size as a decimal string so JSON clients keep precision."""
    if value is None:
        return None
    return str(int(value))


def rating_summary(ratings: Iterable[int]) -> Tuple[float, int]:
    """
    Mean and count of positive ratings.

    Returns:
        (average, count); (0.0, 0) when there are no positive ratings
    """
    positive = [r for r in ratings if r and r > 0]
    if not positive:
        return 0.0, 0
    return sum(positive) / len(positive), len(positive)


def percentage(points: float, max_points: float) -> float:
    """Score as a percentage rounded to one decimal."""
    if not max_points:
        return 0.0
    return round(points / max_points * 100, 1)


def letter_grade(pct: float) -> str:
    if pct >= 90:
        return "A"
    if pct >= 80:
        return "B"
    if pct >= 70:
        return "C"
    if pct >= 60:
        return "D"
    return "F"
