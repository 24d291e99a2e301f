from __future__ import annotations


class RelayError(Exception):
    """Base class for domain errors raised by the status relay core."""


class PlayerNotFoundError(RelayError):
    """No player in the current snapshot matches the requested identifier."""

    def __init__(self, player_id: str) -> None:
        super().__init__(f"player not found: {player_id}")
        self.player_id = player_id


__all__ = ["RelayError", "PlayerNotFoundError"]
