import threading
from typing import List

from fastapi.testclient import TestClient

from src.api.routes import create_app
from src.core.config import get_api_token
from src.core.metrics import MetricsCollector
from src.core.store import StatusStore


def _snapshot(n: int) -> dict:
    return {"hostname": f"server-{n}", "players": [{"name": f"p{n}-{i}", "money": n} for i in range(n % 5 + 1)]}


def test_readers_never_observe_partial_records():
    store = StatusStore(metrics=MetricsCollector())
    errors: List[str] = []
    stop = threading.Event()

    def writer() -> None:
        for n in range(200):
            store.replace(_snapshot(n), f"origin-{n}")
        stop.set()

    def reader() -> None:
        while not stop.is_set():
            record = store.read_full()
            if "message" in record:
                continue
            n = int(record["hostname"].split("-")[1])
            if record["from"] != f"origin-{n}" or len(record["players"]) != n % 5 + 1:
                errors.append(repr(record))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    threads.append(threading.Thread(target=writer))
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert store.read_full()["hostname"] == "server-199"


def _post_update(client: TestClient, n: int, results: List[int]) -> None:
    r = client.post("/gmod/update", json=_snapshot(n), headers={"Authorization": f"Bearer {get_api_token()}"})
    results.append(r.status_code)


def test_concurrent_update_requests_are_handled_thread_safely():
    with TestClient(create_app()) as client:
        threads: List[threading.Thread] = []
        results: List[int] = []
        for n in range(10):
            t = threading.Thread(target=_post_update, args=(client, n, results))
            threads.append(t)
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 10
        assert all(code == 200 for code in results)
        status = client.get("/gmod/status").json()
        assert status["hostname"].startswith("server-")
        assert "players" not in status


def test_gmod_handlers_run_on_the_event_loop():
    import inspect

    from fastapi.routing import APIRoute

    app = create_app()
    gmod = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/gmod/")]
    assert len(gmod) == 5
    assert all(inspect.iscoroutinefunction(r.endpoint) for r in gmod)
