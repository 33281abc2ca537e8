# skill_matcher.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence


_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class MatchResult:
    matched_skills: list[str] = field(default_factory=list)
    match_percentage: float = 0.0
    total_target_skills: int = 0
    subject_matching_skills_count: int = 0


def normalize_skill_name(value: str) -> str:
    return (value or "").strip().lower()


def build_skill_set(skills: Iterable[str] | None) -> set[str]:
    return {normalize_skill_name(s) for s in (skills or []) if isinstance(s, str) and normalize_skill_name(s)}


def unique_target_skills(skills: Sequence[str] | None) -> list[str]:
    """Target skills de-duplicated on their normalized form, first occurrence wins.

    Blank entries are not skills and are dropped; the surviving entries keep their
    original casing and order.
    """

    result: list[str] = []
    seen: set[str] = set()
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        key = normalize_skill_name(skill)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(skill.strip())
    return result


def match_percentage(matched: int, total: int) -> float:
    # Half-up on the exact decimal value: 33.335 -> 33.34, never float drift.
    if total <= 0:
        return 0.0
    pct = (Decimal(matched) * 100 / Decimal(total)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(pct)


def compute_match(subject_skills: Iterable[str] | None, target_skills: Sequence[str] | None) -> MatchResult:
    targets = unique_target_skills(target_skills)
    if not targets:
        return MatchResult()

    subject_set = build_skill_set(subject_skills)
    matched = [skill for skill in targets if normalize_skill_name(skill) in subject_set]

    return MatchResult(
        matched_skills=matched,
        match_percentage=match_percentage(len(matched), len(targets)),
        total_target_skills=len(targets),
        subject_matching_skills_count=len(matched),
    )
