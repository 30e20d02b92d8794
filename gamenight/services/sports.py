# gamenight/services/sports.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# Roster ordering modes
STARTERS_BENCH = "starters_bench"
BY_POSITION = "position"
PASSTHROUGH = "passthrough"

UNLISTED_PRIORITY = 99


@dataclass(frozen=True)
class SportStrategy:
    key: str
    league_path: str  # e.g. "basketball/nba"
    roster_order: str = PASSTHROUGH
    position_priority: Dict[str, int] = field(default_factory=dict)
    stat_category: Optional[str] = None
    # output key -> ESPN stat names tried in order
    stat_fields: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def priority(self, position: Optional[str]) -> int:
        if not isinstance(position, str):
            return UNLISTED_PRIORITY
        return self.position_priority.get(position, UNLISTED_PRIORITY)


NBA = SportStrategy(
    key="nba",
    league_path="basketball/nba",
    roster_order=STARTERS_BENCH,
    position_priority={"PG": 1, "SG": 2, "SF": 3, "PF": 4, "C": 5, "G": 6, "F": 7},
    stat_category="perGame",
    stat_fields={
        "ppg": ("avgPoints", "points"),
        "rpg": ("avgRebounds", "rebounds"),
        "apg": ("avgAssists", "assists"),
        "spg": ("avgSteals",),
        "bpg": ("avgBlocks",),
        "fgPct": ("fieldGoalPct",),
        "threePct": ("threePointFieldGoalPct",),
        "ftPct": ("freeThrowPct",),
        "mpg": ("avgMinutes",),
    },
)

NFL = SportStrategy(
    key="nfl",
    league_path="football/nfl",
    roster_order=BY_POSITION,
    position_priority={
        "QB": 1,
        "RB": 2, "FB": 3,
        "WR": 4, "TE": 5,
        "LT": 6, "LG": 7, "C": 8, "RG": 9, "RT": 10, "OL": 11, "OT": 12, "G": 13,
        "DE": 14, "DT": 15, "NT": 16, "DL": 17,
        "OLB": 18, "ILB": 19, "MLB": 20, "LB": 21,
        "CB": 22, "S": 23, "FS": 24, "SS": 25, "DB": 26,
        "K": 27, "P": 28, "LS": 29,
    },
    stat_category="totals",
    stat_fields={
        "passingYards": ("passingYards",),
        "passingTDs": ("passingTouchdowns",),
        "rushingYards": ("rushingYards",),
        "rushingTDs": ("rushingTouchdowns",),
        "receivingYards": ("receivingYards",),
        "receivingTDs": ("receivingTouchdowns",),
        "receptions": ("receptions",),
        "tackles": ("totalTackles",),
        "sacks": ("sacks",),
        "interceptions": ("interceptions",),
    },
)

MLB = SportStrategy(
    key="mlb",
    league_path="baseball/mlb",
    roster_order=BY_POSITION,
    # starting pitcher on top, relievers at the bottom
    position_priority={
        "SP": 1,
        "C": 2, "DH": 3, "1B": 4, "2B": 5, "3B": 6, "SS": 7, "LF": 8, "CF": 9, "RF": 10,
        "OF": 11, "IF": 12, "UT": 13,
        "RP": 14, "CL": 15, "P": 16,
    },
    stat_category="batting",
    stat_fields={
        "avg": ("avg",),
        "hr": ("homeRuns",),
        "rbi": ("RBIs",),
        "runs": ("runs",),
        "hits": ("hits",),
        "sb": ("stolenBases",),
        "obp": ("OBP",),
        "slg": ("sluggingPct",),
        "ops": ("OPS",),
    },
)

# Scoreboards work for these; rosters stay in upstream order and player stats are empty.
NHL = SportStrategy(key="nhl", league_path="hockey/nhl")
CBB = SportStrategy(key="cbb", league_path="basketball/mens-college-basketball")
CFB = SportStrategy(key="cfb", league_path="football/college-football")

SPORTS: Dict[str, SportStrategy] = {s.key: s for s in (NBA, NFL, MLB, NHL, CBB, CFB)}

SPORT_PATTERN = "^(" + "|".join(SPORTS) + ")$"


def get_sport(key: Optional[str]) -> Optional[SportStrategy]:
    return SPORTS.get((key or "").strip().lower())
