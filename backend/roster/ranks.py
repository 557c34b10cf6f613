# Overview: Static rank table (US Army pattern) with tier and level lookups.

"""
Rank Table

Three tiers, ordered by level. Levels are not unique: SPC and CPL share
level 4, MSG and 1SG share 8, SGM and CSM share 9. A promotion is only
valid when the target level is strictly greater than the current one.

Read-only: also consumed by the chat-bot FAQ surface through /api/ranks.
"""

from __future__ import annotations

from dataclasses import dataclass


class RankTier:
    """Rank tiers, in ascending order of seniority."""
    ENLISTED = "enlisted"
    WARRANT = "warrant"
    OFFICER = "officer"


@dataclass(frozen=True)
class Rank:
    code: str
    name: str
    level: int
    tier: str

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "level": self.level,
            "tier": self.tier,
        }


ENLISTED_RANKS = (
    Rank("PV1", "Private", 1, RankTier.ENLISTED),
    Rank("PV2", "Private", 2, RankTier.ENLISTED),
    Rank("PFC", "Private First Class", 3, RankTier.ENLISTED),
    Rank("SPC", "Specialist", 4, RankTier.ENLISTED),
    Rank("CPL", "Corporal", 4, RankTier.ENLISTED),
    Rank("SGT", "Sergeant", 5, RankTier.ENLISTED),
    Rank("SSG", "Staff Sergeant", 6, RankTier.ENLISTED),
    Rank("SFC", "Sergeant First Class", 7, RankTier.ENLISTED),
    Rank("MSG", "Master Sergeant", 8, RankTier.ENLISTED),
    Rank("1SG", "First Sergeant", 8, RankTier.ENLISTED),
    Rank("SGM", "Sergeant Major", 9, RankTier.ENLISTED),
    Rank("CSM", "Command Sergeant Major", 9, RankTier.ENLISTED),
    Rank("SMA", "Sergeant Major of the Army", 10, RankTier.ENLISTED),
)

WARRANT_RANKS = (
    Rank("WO1", "Warrant Officer 1", 11, RankTier.WARRANT),
    Rank("CW2", "Chief Warrant Officer 2", 12, RankTier.WARRANT),
    Rank("CW3", "Chief Warrant Officer 3", 13, RankTier.WARRANT),
    Rank("CW4", "Chief Warrant Officer 4", 14, RankTier.WARRANT),
    Rank("CW5", "Chief Warrant Officer 5", 15, RankTier.WARRANT),
)

OFFICER_RANKS = (
    Rank("2LT", "Second Lieutenant", 16, RankTier.OFFICER),
    Rank("1LT", "First Lieutenant", 17, RankTier.OFFICER),
    Rank("CPT", "Captain", 18, RankTier.OFFICER),
    Rank("MAJ", "Major", 19, RankTier.OFFICER),
    Rank("LTC", "Lieutenant Colonel", 20, RankTier.OFFICER),
    Rank("COL", "Colonel", 21, RankTier.OFFICER),
    Rank("BG", "Brigadier General", 22, RankTier.OFFICER),
    Rank("MG", "Major General", 23, RankTier.OFFICER),
    Rank("LTG", "Lieutenant General", 24, RankTier.OFFICER),
    Rank("GEN", "General", 25, RankTier.OFFICER),
    Rank("GA", "General of the Army", 26, RankTier.OFFICER),
)

ALL_RANKS = ENLISTED_RANKS + WARRANT_RANKS + OFFICER_RANKS

RANK_CODES = tuple(rank.code for rank in ALL_RANKS)

_RANKS_BY_CODE = {rank.code: rank for rank in ALL_RANKS}


def get_rank(code: str | None) -> Rank | None:
    """Look up a rank by code. Returns None for unknown codes."""
    if code is None:
        return None
    return _RANKS_BY_CODE.get(code)


def is_valid_rank(code: str | None) -> bool:
    return get_rank(code) is not None


def get_rank_level(code: str) -> int:
    """Level for a rank code, 0 when unknown."""
    rank = get_rank(code)
    return rank.level if rank else 0


def get_ranks_by_tier(tier: str) -> list[Rank]:
    return [rank for rank in ALL_RANKS if rank.tier == tier]


def get_rank_display_name(code: str) -> str:
    """'SPC - Specialist' style label; unknown codes are returned unchanged."""
    rank = get_rank(code)
    return f"{rank.code} - {rank.name}" if rank else code
