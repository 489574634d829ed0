"""Standard individual champion awards (Kala Prathibha, Sarga Prathibha and variants)."""

from festival.categories import ZONES, AgeGroup, Category
from festival.leaderboard import register_award
from festival.leaderboard.base import ChampionAward


class CategoryChampion(ChampionAward):
    """Champion over non-general programs, optionally narrowed by category tags.

    Args:
        key: Stable identifier
        title: Display title
        zone: Only count programs of this zone
        off_stage: Only count off-stage programs
        age_group: Only count programs of this age group
    """

    def __init__(
        self,
        key: str,
        title: str,
        zone: str | None = None,
        off_stage: bool = False,
        age_group: AgeGroup | None = None,
    ):
        self._key = key
        self._title = title
        self.zone = zone
        self.off_stage = off_stage
        self.age_group = age_group

    @property
    def key(self) -> str:
        return self._key

    @property
    def title(self) -> str:
        return self._title

    def includes(self, category: Category) -> bool:
        if category.is_general:
            return False
        if self.off_stage and not category.is_off_stage:
            return False
        if self.zone is not None and category.zone != self.zone:
            return False
        if self.age_group is not None and category.age_group != self.age_group:
            return False
        return True


register_award(CategoryChampion("kala_prathibha", "Kala Prathibha"))
register_award(CategoryChampion("sarga_prathibha", "Sarga Prathibha", off_stage=True))
register_award(CategoryChampion("junior_kala_prathibha", "Junior Kala Prathibha", age_group="junior"))
register_award(CategoryChampion("senior_kala_prathibha", "Senior Kala Prathibha", age_group="senior"))

for _zone in ZONES:
    _prefix = f"{_zone.lower()}_zone"
    register_award(CategoryChampion(
        f"{_prefix}_kala_prathibha", f"{_zone} Zone Kala Prathibha", zone=_zone))
    register_award(CategoryChampion(
        f"{_prefix}_sarga_prathibha", f"{_zone} Zone Sarga Prathibha", zone=_zone, off_stage=True))
    register_award(CategoryChampion(
        f"{_prefix}_junior_kala_prathibha", f"{_zone} Zone Junior Kala Prathibha",
        zone=_zone, age_group="junior"))
    register_award(CategoryChampion(
        f"{_prefix}_senior_kala_prathibha", f"{_zone} Zone Senior Kala Prathibha",
        zone=_zone, age_group="senior"))
