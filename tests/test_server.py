from __future__ import annotations

from pathlib import Path

from folder_viewer import server
from folder_viewer.errors import StoreError
from folder_viewer.services.container import Services
from folder_viewer.services.hierarchy import HierarchyService
from folder_viewer.services.storage import FolderStorage


def test_main_exits_when_store_unreachable(monkeypatch):  # noqa: ANN001
    def _unreachable(**kwargs):
        raise StoreError("Folder store is unavailable.")

    monkeypatch.setattr(server, "create_services", _unreachable)
    assert server.main() == 1


def test_main_runs_app_with_connected_store(tmp_path: Path, monkeypatch):  # noqa: ANN001
    storage = FolderStorage(db_path=tmp_path / "server_test.db")
    services = Services(storage=storage, hierarchy=HierarchyService(storage))
    ran = {}

    monkeypatch.setattr(server, "create_services", lambda **kwargs: services)
    monkeypatch.setattr(server.atexit, "register", lambda fn: ran.setdefault("cleanup", fn))
    monkeypatch.setattr("flask.Flask.run", lambda self, **kwargs: ran.setdefault("run", kwargs))

    assert server.main() == 0
    assert ran["run"]["port"] == server.Config.PORT
    assert ran["cleanup"] == services.close
    services.close()
