"""Tests for the points calculator and grade helpers."""

import pytest

from festival.points import (
    calculate_points,
    grade_breakdown,
    grade_from_score,
    grade_value,
)


class TestCalculatePoints:
    def test_individual_maximum(self):
        assert calculate_points(100, "A+", False) == 10

    def test_group_maximum(self):
        assert calculate_points(100, "A+", True) == 20

    def test_zero_score_no_grade(self):
        """No grade is still worth one grade point."""
        assert calculate_points(0, "", False) == 1

    def test_group_example(self):
        """50 -> 5 score points, B doubled -> 6 grade points."""
        assert calculate_points(50, "B", True) == 11

    def test_individual_examples(self):
        assert calculate_points(90, "A+", False) == 9.5
        assert calculate_points(60, "B", False) == 6
        assert calculate_points(80, "A", False) == 8

    def test_capped_at_maximum(self):
        assert calculate_points(100, "A+", False) <= 10
        assert calculate_points(99, "A+", True) == 19.9

    def test_rounds_half_up_to_one_decimal(self):
        # 25 -> 1.25 score points
        assert calculate_points(25, "", False) == 2.3
        # 75 -> 3.75 score points
        assert calculate_points(75, "C", False) == 5.8

    def test_exact_halves_from_integer_scores(self):
        # 83 -> 4.15, 59 -> 2.95, 69 -> 3.45
        assert calculate_points(83, "A+", False) == 9.2
        assert calculate_points(59, "B", False) == 6.0
        assert calculate_points(69, "B", False) == 6.5

    def test_unknown_grade_is_worth_nothing(self):
        assert calculate_points(50, "Z", False) == 2.5

    def test_none_grade_counts_as_no_grade(self):
        assert calculate_points(0, None, False) == 1

    def test_scores_are_clamped(self):
        assert calculate_points(150, "", False) == calculate_points(100, "", False)
        assert calculate_points(-20, "", False) == calculate_points(0, "", False)

    def test_nan_score_counts_as_zero(self):
        assert calculate_points(float("nan"), "A", False) == 4

    @pytest.mark.parametrize("grade", ["A+", "A", "B", "C", ""])
    @pytest.mark.parametrize("is_group", [True, False])
    def test_result_in_range(self, grade, is_group):
        maximum = 20 if is_group else 10
        for score in (0, 1, 25, 49.5, 50, 77.7, 99, 100):
            assert 0 <= calculate_points(score, grade, is_group) <= maximum


class TestGradeHelpers:
    def test_grade_value(self):
        assert grade_value("A+") == 5
        assert grade_value(" B ") == 3
        assert grade_value("") == 1
        assert grade_value("No Grade") == 0

    @pytest.mark.parametrize("score,grade", [
        (95, "A+"), (80, "A+"), (79, "A"), (70, "A"),
        (50, "B"), (49, "C"), (30, "C"), (29, ""),
    ])
    def test_grade_from_score(self, score, grade):
        assert grade_from_score(score) == grade

    def test_grade_breakdown_individual(self):
        assert grade_breakdown(False) == [
            {"grade": "A+", "points": 5},
            {"grade": "A", "points": 4},
            {"grade": "B", "points": 3},
            {"grade": "C", "points": 2},
            {"grade": "No Grade", "points": 1},
        ]

    def test_grade_breakdown_group_doubles(self):
        assert [row["points"] for row in grade_breakdown(True)] == [10, 8, 6, 4, 2]
