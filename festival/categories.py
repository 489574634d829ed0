"""Structured classification of free-text program categories."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

StageType = Literal["stage", "off_stage", "general"]
AgeGroup = Literal["junior", "senior"]

ZONES = ("A", "B", "C")

OFF_STAGE_MARKERS = ("no stage", "non stage", "off stage")


@dataclass(frozen=True)
class Category:
    """Zone, stage type and age group encoded in a category string.

    Attributes:
        zone: "A", "B", "C" or None when the text names no zone
        stage_type: "general", "off_stage" or "stage"
        age_group: "junior", "senior" or None
    """
    zone: str | None
    stage_type: StageType
    age_group: AgeGroup | None

    @property
    def is_general(self) -> bool:
        return self.stage_type == "general"

    @property
    def is_off_stage(self) -> bool:
        return self.stage_type == "off_stage"


@lru_cache(maxsize=512)
def classify_category(text: str | None) -> Category:
    """Derive a Category from legacy free text with case-insensitive substring rules.

    - general: contains "general" (takes precedence over the stage markers)
    - off stage: contains "no stage", "non stage" or "off stage"
    - zone: contains "a zone", "b zone" or "c zone" (first match in that order)
    - age group: contains "junior" or "senior"

    Example:
        >>> classify_category("B zone no stage junior")
        Category(zone='B', stage_type='off_stage', age_group='junior')
    """
    lowered = (text or "").lower()

    zone = next((z for z in ZONES if f"{z.lower()} zone" in lowered), None)

    stage_type: StageType
    if "general" in lowered:
        stage_type = "general"
    elif any(marker in lowered for marker in OFF_STAGE_MARKERS):
        stage_type = "off_stage"
    else:
        stage_type = "stage"

    age_group: AgeGroup | None = None
    if "junior" in lowered:
        age_group = "junior"
    elif "senior" in lowered:
        age_group = "senior"

    return Category(zone=zone, stage_type=stage_type, age_group=age_group)
