from __future__ import annotations

import pytest

from careerlink.services.skill_matcher import (
    build_skill_set,
    compute_match,
    match_percentage,
    unique_target_skills,
)


def test_match_uses_target_casing_and_order() -> None:
    result = compute_match(["React", "node.js"], ["react", "Python"])
    assert result.matched_skills == ["react"]
    assert result.match_percentage == 50.0
    assert result.total_target_skills == 2
    assert result.subject_matching_skills_count == 1


def test_match_normalizes_whitespace_and_case() -> None:
    result = compute_match(["  PYTHON ", "sql"], ["Python", "SQL", "Docker"])
    assert result.matched_skills == ["Python", "SQL"]
    assert result.match_percentage == 66.67


def test_membership_is_exact_not_substring() -> None:
    result = compute_match(["java"], ["JavaScript"])
    assert result.matched_skills == []
    assert result.match_percentage == 0.0


def test_empty_target_is_zero_result_not_error() -> None:
    result = compute_match(["python"], [])
    assert result.matched_skills == []
    assert result.match_percentage == 0.0
    assert result.total_target_skills == 0
    assert result.subject_matching_skills_count == 0


def test_empty_subject_scores_zero() -> None:
    result = compute_match([], ["Python", "Go"])
    assert result.match_percentage == 0.0
    assert result.total_target_skills == 2


def test_duplicate_target_skills_collapse_first_wins() -> None:
    assert unique_target_skills(["Python", "python ", "", "  ", "Go"]) == ["Python", "Go"]
    result = compute_match(["python"], ["Python", "PYTHON", "Go"])
    assert result.matched_skills == ["Python"]
    assert result.total_target_skills == 2
    assert result.match_percentage == 50.0


def test_build_skill_set_ignores_blanks_and_non_strings() -> None:
    assert build_skill_set([" A ", "a", "", None, 3, "b"]) == {"a", "b"}
    assert build_skill_set(None) == set()


@pytest.mark.parametrize(
    ("matched", "total", "expected"),
    [
        (1, 3, 33.33),
        (2, 3, 66.67),
        (1, 8, 12.5),
        (3, 3, 100.0),
        (0, 5, 0.0),
        (0, 0, 0.0),
    ],
)
def test_match_percentage_rounding(matched: int, total: int, expected: float) -> None:
    assert match_percentage(matched, total) == expected


def test_match_percentage_rounds_half_up_on_exact_decimal() -> None:
    # 6667 / 20000 * 100 == 33.335 exactly
    assert match_percentage(6667, 20000) == 33.34
    assert match_percentage(1, 400) == 0.25


def test_percentage_always_within_bounds() -> None:
    for subject, target in [
        (["a", "b"], ["a"]),
        (["a"], ["a", "b", "c"]),
        ([], []),
        (["x"], ["y"]),
    ]:
        pct = compute_match(subject, target).match_percentage
        assert 0.0 <= pct <= 100.0
