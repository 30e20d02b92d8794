# gamenight/services/roster.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from gamenight.models.types import RosterEntry
from gamenight.services.fields import as_list, dig, first_present, to_int
from gamenight.services.sports import BY_POSITION, STARTERS_BENCH, SportStrategy

logger = logging.getLogger("gamenight.roster")

# ESPN nests grouped rosters under either of these keys
GROUP_ITEM_KEYS = ("items", "athletes")
ACTIVE = "Active"


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _position(player: Dict[str, Any], group_position: Any = None) -> Optional[str]:
    group = _text(group_position)
    pos = player.get("position")
    if isinstance(pos, str):
        return pos or group
    return first_present(_text(dig(pos, "abbreviation")), _text(dig(pos, "name")), group)


def roster_entry(player: Dict[str, Any], group_position: Any = None) -> RosterEntry:
    return {
        "id": player.get("id"),
        "name": first_present(player.get("displayName"), player.get("fullName")),
        "firstName": player.get("firstName"),
        "lastName": player.get("lastName"),
        "position": _position(player, group_position),
        "jersey": player.get("jersey"),
        "headshot": dig(player, "headshot", "href"),
        "status": _text(dig(player, "injuries", 0, "status")) or ACTIVE,
        "injuryType": _text(dig(player, "injuries", 0, "type")),
        "experience": to_int(dig(player, "experience", "years")),
        "age": to_int(player.get("age")),
        "height": player.get("displayHeight"),
        "weight": player.get("displayWeight"),
        "college": dig(player, "college", "name"),
        "isStarter": bool(player.get("starter")),
    }


def _group_items(group: Dict[str, Any]) -> Optional[list]:
    for key in GROUP_ITEM_KEYS:
        if isinstance(group.get(key), list):
            return group[key]
    return None


def normalize_roster(athletes: Any) -> List[RosterEntry]:
    """
    Flatten an ESPN roster `athletes` payload.

    Two encodings exist:
      - flat: a list of player objects (first element has id + displayName)
      - grouped: a list of position groups, each with `items` or `athletes`
    Grouped players without their own position inherit the group's label.
    Anything else yields an empty roster.
    """
    athletes = as_list(athletes)
    if not athletes or not isinstance(athletes[0], dict):
        return []

    first = athletes[0]
    if first.get("id") and first.get("displayName"):
        return [roster_entry(p) for p in athletes if isinstance(p, dict)]

    if _group_items(first) is None:
        logger.warning("ROSTER unrecognized payload shape, keys=%s", sorted(first)[:8])
        return []

    roster: List[RosterEntry] = []
    for group in athletes:
        if not isinstance(group, dict):
            continue
        for player in _group_items(group) or []:
            if isinstance(player, dict):
                roster.append(roster_entry(player, group.get("position")))
    return roster


def _experience(entry: RosterEntry) -> int:
    return entry.get("experience") or 0


def sort_roster(roster: List[RosterEntry], strategy: SportStrategy) -> List[RosterEntry]:
    """
    Order a flattened roster for display. Sorting is stable, so every entry
    appears exactly once and equal keys keep upstream order.
    """
    if not roster:
        return []

    if strategy.roster_order == STARTERS_BENCH:
        starters = sorted(
            (p for p in roster if p["isStarter"]),
            key=lambda p: strategy.priority(p["position"]),
        )
        bench = sorted(
            (p for p in roster if not p["isStarter"]),
            key=lambda p: (-_experience(p), strategy.priority(p["position"])),
        )
        return starters + bench

    if strategy.roster_order == BY_POSITION:
        return sorted(roster, key=lambda p: (strategy.priority(p["position"]), -_experience(p)))

    return list(roster)


def injury_report(roster: List[RosterEntry], limit: int = 5) -> List[Dict[str, Any]]:
    out = []
    for p in roster:
        status = _text(p.get("status"))
        if not status or status.lower() == ACTIVE.lower():
            continue
        out.append({
            "name": p["name"],
            "position": p["position"],
            "status": status,
            "type": p["injuryType"],
        })
        if len(out) >= limit:
            break
    return out
