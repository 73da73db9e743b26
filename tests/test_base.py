import threading
import time
from types import SimpleNamespace

from subscription_cost_svc.models import base


def test_engine_is_created_once_under_concurrency(monkeypatch):
    created = []

    def slow_create_engine(url, **kwargs):
        time.sleep(0.05)
        engine = object()
        created.append(engine)
        return engine

    monkeypatch.setattr(base, "_engine", None)
    monkeypatch.setattr(base, "_SessionLocal", None)
    monkeypatch.setattr(base, "create_engine", slow_create_engine)
    monkeypatch.setattr(base, "get_settings", lambda: SimpleNamespace(DATABASE_URL="sqlite://"))

    results = []
    threads = [threading.Thread(target=lambda: results.append(base.get_engine())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
    assert all(engine is created[0] for engine in results)
