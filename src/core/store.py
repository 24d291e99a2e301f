"""Single-slot store for the latest game server status.

Exactly one record is live at any time. Writes swap it wholesale; reads hand
out deep copies so callers can never reach into the stored document.
The HTTP handlers are async and run on the event loop; the store itself is a
plain object that can be driven from any thread, so every access takes the lock.
"""

from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from src.core.config import PLACEHOLDER_MESSAGE
from src.core.errors import PlayerNotFoundError
from src.core.metrics import MetricsCollector, metrics as default_metrics
from src.core.stats import player_list
from src.core.time_utils import isoformat_utc, utc_now
from src.models.status import Player, StatusRecord

logger = logging.getLogger(__name__)


def _summary_field(record: Mapping[str, Any], key: str) -> Any:
    return record.get(key) or "?"


class StatusStore:
    """Holds the most recent StatusRecord pushed by the game server."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._metrics = metrics if metrics is not None else default_metrics
        self._record: StatusRecord = {"message": PLACEHOLDER_MESSAGE}

    def replace(self, data: Mapping[str, Any], origin: str) -> StatusRecord:
        """Replace the current record with `data` stamped with lastUpdate/from.

        No field is validated; the store-assigned keys override caller values.
        """
        record: Dict[str, Any] = copy.deepcopy(dict(data))
        record["lastUpdate"] = isoformat_utc(self._clock())
        record["from"] = origin
        with self._lock:
            self._record = record  # type: ignore[assignment]

        logger.info(
            "status_update",
            extra={
                "origin": origin,
                "hostname": _summary_field(record, "hostname"),
                "map": _summary_field(record, "map"),
                "gamemode": _summary_field(record, "gamemode"),
                "player_count": len(player_list(record)),
            },
        )
        self._metrics.increment_event("status.updates")
        return copy.deepcopy(record)  # type: ignore[return-value]

    def read_full(self) -> StatusRecord:
        with self._lock:
            return copy.deepcopy(self._record)

    def read_without_players(self) -> Dict[str, Any]:
        with self._lock:
            return {k: copy.deepcopy(v) for k, v in self._record.items() if k != "players"}

    def read_players(self) -> List[Player]:
        with self._lock:
            return copy.deepcopy(player_list(self._record))

    def find_player(self, player_id: str) -> Player:
        """Look up a player by SteamID (case-insensitive) or SteamID64 (exact).

        The id is lowercased once up front and compared against both fields,
        so the first matching player in list order wins.
        """
        wanted = player_id.lower()
        with self._lock:
            for p in player_list(self._record):
                if not isinstance(p, Mapping):
                    continue
                steamid = p.get("steamid")
                steamid64 = p.get("steamid64")
                if (isinstance(steamid, str) and steamid and steamid.lower() == wanted) or (
                    isinstance(steamid64, str) and steamid64 and steamid64 == wanted
                ):
                    return copy.deepcopy(p)  # type: ignore[return-value]
        self._metrics.increment_event("player.not_found")
        raise PlayerNotFoundError(player_id)

    def last_update(self) -> Optional[str]:
        with self._lock:
            value = self._record.get("lastUpdate")
        return value if isinstance(value, str) else None


__all__ = ["StatusStore"]
