"""
Locust load testing for the GMod status relay.

Simulates one game server pushing snapshots and many dashboards polling:
- GameServerUser posts a fresh random snapshot to /gmod/update
- DashboardUser reads status, players, single players and DarkRP stats

Usage examples:
  # Start your API server first (in another terminal):
  #   uvicorn src.main:app --host 0.0.0.0 --port 5050
  # Then run Locust pointing to the host:
  #   locust -f scripts/load/locustfile.py --host http://127.0.0.1:5050
  # In the web UI, set Users (spawned) to a few hundred; keep one pusher.

Environment variables (optional):
- API_TOKEN: bearer token for the update endpoint (default: "supersecret")
- PLAYER_COUNT: players per generated snapshot (default: 64)
- PUSH_INTERVAL: seconds between pushes (default: 1.0)
- WAIT_MIN: minimum dashboard wait between tasks in seconds (default: 0.1)
- WAIT_MAX: maximum dashboard wait between tasks in seconds (default: 0.5)

Notes:
- Locust is only needed for load runs; install it via the `load` extra:
    pip install -e .[load]
"""
from __future__ import annotations

import os
import random
from typing import Any, Dict, List

from locust import FastHttpUser, constant, task, between


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


JOBS = ["Citizen", "Police", "Medic", "Gun Dealer", "Hobo", "Mayor", ""]
PLAYER_COUNT = _env_int("PLAYER_COUNT", 64)


def _steamid(i: int) -> str:
    return f"STEAM_0:{i % 2}:{100000 + i}"


def _steamid64(i: int) -> str:
    return str(76561198000000000 + i)


def build_snapshot(player_count: int) -> Dict[str, Any]:
    players: List[Dict[str, Any]] = []
    for i in range(player_count):
        players.append({
            "steamid": _steamid(i),
            "steamid64": _steamid64(i),
            "name": f"Player{i}",
            "money": random.randint(0, 500000),
            "wanted": random.random() < 0.1,
            "job": random.choice(JOBS),
        })
    return {
        "hostname": "Load Test DarkRP",
        "map": "rp_downtown_v4c_v2",
        "gamemode": "darkrp",
        "players": players,
    }


class GameServerUser(FastHttpUser):
    """The single writer: pushes a full snapshot on a fixed cadence."""

    fixed_count = 1
    wait_time = constant(_env_float("PUSH_INTERVAL", 1.0))

    def on_start(self) -> None:
        token = os.getenv("API_TOKEN", "supersecret")
        self.client.headers.update({"Authorization": f"Bearer {token}"})

    @task
    def push_update(self) -> None:
        self.client.post("/gmod/update", json=build_snapshot(PLAYER_COUNT), name="/gmod/update")


class DashboardUser(FastHttpUser):
    """Read-only dashboard polling the relay."""

    wait_time = between(_env_float("WAIT_MIN", 0.1), _env_float("WAIT_MAX", 0.5))

    @task(3)
    def status(self) -> None:
        self.client.get("/gmod/status", name="/gmod/status")

    @task(2)
    def players(self) -> None:
        self.client.get("/gmod/players", name="/gmod/players")

    @task(2)
    def darkrp_stats(self) -> None:
        self.client.get("/gmod/darkrp/stats", name="/gmod/darkrp/stats")

    @task(1)
    def single_player(self) -> None:
        i = random.randrange(max(1, PLAYER_COUNT))
        pid = _steamid(i) if random.random() < 0.5 else _steamid64(i)
        with self.client.get(f"/gmod/player/{pid}", name="/gmod/player/:id", catch_response=True) as resp:
            # Before the first push every lookup misses
            if resp.status_code == 404:
                resp.success()
