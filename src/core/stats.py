from __future__ import annotations

"""DarkRP economy statistics over the current snapshot.

The game server may ship its own pre-computed `darkrp` block; when it does,
that block is served as-is. Otherwise the numbers are derived live from the
player list in a single pass.

Numbers follow the sender's JSON conventions: there is no int/float split on
the wire, so integral results are reported as ints (100, not 100.0).
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Union

from src.models.status import DarkRPStats, empty_darkrp_stats

Number = Union[int, float]


def _integral(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _parse_number(text: str) -> Number:
    s = text.strip()
    if not s or "_" in s:
        return 0
    if s[:2].lower() in ("0x", "0o", "0b"):
        try:
            return int(s, 0)
        except ValueError:
            return 0
    try:
        parsed = float(s)
    except ValueError:
        return 0
    return _integral(parsed) if math.isfinite(parsed) else 0


def coerce_money(value: Any) -> Number:
    """Coerce a player's money field to a number; anything unusable becomes 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _integral(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        return _parse_number(value)
    return 0


def job_key(job: Any) -> str:
    """Distribution key for a job; falsy jobs count as "Unknown"."""
    if not job:
        return "Unknown"
    if isinstance(job, bool):
        return "true"
    if isinstance(job, float):
        return str(_integral(job))
    return str(job)


def player_list(record: Mapping[str, Any]) -> List[Any]:
    """Return the record's players when it is a list, else an empty list."""
    players = record.get("players")
    return players if isinstance(players, list) else []


def derive_darkrp_stats(record: Mapping[str, Any]) -> Union[DarkRPStats, Dict[str, Any]]:
    """Return DarkRP stats for a status record.

    A sender-supplied `darkrp` mapping that carries a `playerCount` key wins and
    is returned verbatim, without any consistency check against `players`.
    """
    darkrp = record.get("darkrp")
    if isinstance(darkrp, Mapping) and "playerCount" in darkrp:
        return darkrp

    players = player_list(record)
    if not players:
        return empty_darkrp_stats()

    total_money: Number = 0
    wanted_count = 0
    richest: Optional[Mapping[str, Any]] = None
    richest_money: Number = 0
    job_distribution: Dict[str, int] = {}

    for entry in players:
        p: Mapping[str, Any] = entry if isinstance(entry, Mapping) else {}
        money = coerce_money(p.get("money"))
        total_money += money
        if p.get("wanted"):
            wanted_count += 1
        # strictly greater, so the earliest player keeps a tie
        if richest is None or money > richest_money:
            richest = p
            richest_money = money
        key = job_key(p.get("job"))
        job_distribution[key] = job_distribution.get(key, 0) + 1

    return {
        "playerCount": len(players),
        "wantedCount": wanted_count,
        "totalMoney": _integral(total_money),
        "avgMoney": _integral(total_money / len(players)),
        "richestPlayer": richest.get("name") if richest is not None else None,
        "jobDistribution": job_distribution,
    }


__all__ = ["coerce_money", "job_key", "player_list", "derive_darkrp_stats"]
