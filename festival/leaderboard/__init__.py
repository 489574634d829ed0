"""Champion awards computed over completed programs."""

from .base import ChampionAward

# Award registry - import festival.leaderboard.champions to register the standard awards
_awards: list[ChampionAward] = []


def register_award(award: ChampionAward) -> ChampionAward:
    """Register an award instance."""
    _awards.append(award)
    return award


def get_all_awards() -> list[ChampionAward]:
    """Return all registered awards, in registration order."""
    return _awards.copy()
