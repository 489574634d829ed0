"""Points calculator: converts a judge's score and grade into normalized points."""

import math
from decimal import ROUND_HALF_UP, Decimal

GRADE_VALUES: dict[str, int] = {
    "A+": 5,
    "A": 4,
    "B": 3,
    "C": 2,
    "": 1,  # no grade
}

AVAILABLE_GRADES = ["A+", "A", "B", "C", "No Grade"]


def round_half_up(value: float | Decimal) -> float:
    """Round to one decimal place, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def grade_value(grade: str | None) -> int:
    """Grade points before the group multiplier. Unknown grades are worth 0."""
    if grade is None:
        grade = ""
    return GRADE_VALUES.get(grade.strip(), 0)


def calculate_points(score: float, grade: str | None, is_group: bool) -> float:
    """Calculate normalized points for a score (0-100) and letter grade.

    Half of the maximum comes from the score, the rest from the grade:

        max_points   = 20 if group else 10
        score_points = score / 100 * max_points / 2
        grade_points = grade_value * (2 if group else 1)
        total        = min(round(score_points + grade_points, 1), max_points)

    Scores outside [0, 100] are clamped before use; NaN counts as 0.

    Example:
        >>> calculate_points(90, "A+", False)
        9.5
        >>> calculate_points(50, "B", True)
        11.0
    """
    max_points = 20 if is_group else 10
    score = float(score or 0)
    if math.isnan(score):
        score = 0.0
    score = min(max(score, 0.0), 100.0)
    score_points = Decimal(str(score)) * max_points / 200
    grade_points = grade_value(grade) * (2 if is_group else 1)
    return min(round_half_up(score_points + grade_points), float(max_points))


def grade_from_score(score: float) -> str:
    """Suggest a grade for a raw score."""
    if score >= 80:
        return "A+"
    if score >= 70:
        return "A"
    if score >= 50:
        return "B"
    if score >= 30:
        return "C"
    return ""


def grade_breakdown(is_group: bool) -> list[dict[str, int | str]]:
    """Grade points available for each grade label, for display."""
    multiplier = 2 if is_group else 1
    return [
        {"grade": label, "points": grade_value("" if label == "No Grade" else label) * multiplier}
        for label in AVAILABLE_GRADES
    ]
