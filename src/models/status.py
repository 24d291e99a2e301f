from __future__ import annotations

"""Typed views over the open JSON documents the relay stores.

The game server owns the payload shape; these types only name the fields the
relay reads. Unknown keys pass through untouched, so every type is total=False
and nothing here is validated at runtime.
"""

from typing import Any, Dict, List, Optional, TypedDict, Union


class Player(TypedDict, total=False):
    steamid: str
    steamid64: str
    name: str
    money: Union[int, float, str, None]
    wanted: Any
    job: Optional[str]


class DarkRPStats(TypedDict):
    playerCount: int
    wantedCount: int
    totalMoney: Union[int, float]
    avgMoney: Union[int, float]
    richestPlayer: Optional[str]
    jobDistribution: Dict[str, int]


# "from" is a keyword, hence the functional form
StatusRecord = TypedDict(
    "StatusRecord",
    {
        "hostname": str,
        "map": str,
        "gamemode": str,
        "players": List[Player],
        "darkrp": Dict[str, Any],
        "lastUpdate": str,
        "from": str,
        "message": str,
    },
    total=False,
)


def empty_darkrp_stats() -> DarkRPStats:
    """Stats reported when the snapshot holds no players."""
    return {
        "playerCount": 0,
        "wantedCount": 0,
        "totalMoney": 0,
        "avgMoney": 0,
        "richestPlayer": None,
        "jobDistribution": {},
    }


__all__ = ["Player", "DarkRPStats", "StatusRecord", "empty_darkrp_stats"]
