from __future__ import annotations

from pathlib import Path

import pytest
import requests

from folder_viewer import create_app
from folder_viewer.client import (
    LOAD_ERROR_MESSAGE,
    FolderApiClient,
    FolderApiError,
    FolderBrowser,
    main,
)
from folder_viewer.services.container import Services
from folder_viewer.services.hierarchy import HierarchyService
from folder_viewer.services.storage import FolderStorage

BASE_URL = "http://folders.test"


class _FlaskResponse:
    def __init__(self, resp):  # noqa: ANN001 - werkzeug test response
        self.status_code = resp.status_code
        self._resp = resp

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("response is not JSON")
        return data


class _FlaskSession:
    """Routes requests-style calls into the Flask test client."""

    def __init__(self, test_client):  # noqa: ANN001
        self.test_client = test_client

    def request(self, method, url, timeout=None, json=None):  # noqa: ANN001
        path = url[len(BASE_URL):]
        return _FlaskResponse(self.test_client.open(path, method=method, json=json))


class _DownSession:
    def request(self, method, url, timeout=None, json=None):  # noqa: ANN001
        raise requests.ConnectionError("connection refused")


@pytest.fixture()
def app(tmp_path: Path):
    storage = FolderStorage(db_path=tmp_path / "client_test.db")
    services = Services(storage=storage, hierarchy=HierarchyService(storage))
    app = create_app(testing=True, services=services)
    yield app
    services.close()


@pytest.fixture()
def api(app):  # noqa: ANN001
    return FolderApiClient(BASE_URL, session=_FlaskSession(app.test_client()))


@pytest.fixture()
def browser(api):  # noqa: ANN001
    b = FolderBrowser(api)
    b.load()
    return b


def _root(browser):  # noqa: ANN001
    return next(f for f in browser.folders if f.is_root)


def test_render_before_load(api):  # noqa: ANN001
    assert FolderBrowser(api).render() == "Loading folders..."


def test_load_shows_collapsed_root(browser):  # noqa: ANN001
    assert browser.error is None
    assert len(browser.folders) == 1
    assert browser.expanded == frozenset()
    assert browser.render() == "  Root Folder"


def test_add_folder_expands_parent(browser):  # noqa: ANN001
    root = _root(browser)
    docs = browser.add_folder("Docs", root.id)

    assert root.id in browser.expanded
    tree = browser.tree()
    assert [c.id for c in tree[0].children] == [docs.id]
    assert browser.render().splitlines() == ["▾ Root Folder", "    Docs"]


def test_add_folder_keeps_parent_expanded(browser):  # noqa: ANN001
    root = _root(browser)
    browser.add_folder("A", root.id)
    browser.add_folder("B", root.id)
    assert root.id in browser.expanded
    assert [c.name for c in browser.tree()[0].children] == ["A", "B"]


def test_toggle_collapses_and_expands(browser):  # noqa: ANN001
    root = _root(browser)
    browser.add_folder("Docs", root.id)

    browser.toggle(root.id)
    assert browser.tree()[0].children == []
    browser.toggle(root.id)
    assert len(browser.tree()[0].children) == 1


def test_delete_folder_patches_local_state(browser, api):  # noqa: ANN001
    root = _root(browser)
    docs = browser.add_folder("Docs", root.id)
    browser.toggle(docs.id)

    assert browser.delete_folder(docs.id) == "Folder deleted successfully."
    assert [f.id for f in browser.folders] == [root.id]
    assert docs.id not in browser.expanded
    assert [f.id for f in api.list_folders()] == [root.id]


def test_server_rejection_leaves_state_untouched(browser):  # noqa: ANN001
    root = _root(browser)
    a = browser.add_folder("A", root.id)
    browser.add_folder("B", a.id)
    before = list(browser.folders)

    with pytest.raises(FolderApiError) as exc:
        browser.delete_folder(a.id)
    assert exc.value.status_code == 400
    assert exc.value.message == "Cannot delete a folder that contains other folders."

    with pytest.raises(FolderApiError) as exc:
        browser.delete_folder(root.id)
    assert exc.value.status_code == 403

    with pytest.raises(FolderApiError) as exc:
        browser.add_folder("", root.id)
    assert exc.value.status_code == 400

    assert browser.folders == before


def test_load_failure_sets_persistent_error():
    b = FolderBrowser(FolderApiClient(BASE_URL, session=_DownSession()))
    b.load()

    assert b.error == LOAD_ERROR_MESSAGE
    assert b.render() == f"Error: {LOAD_ERROR_MESSAGE}"
    assert b.folders == []


def test_load_creates_root_when_server_returns_none(api, monkeypatch):  # noqa: ANN001
    created = []
    original_create = api.create_folder

    def _create(name, parent_id=None):  # noqa: ANN001
        folder = original_create(name, parent_id)
        created.append(folder)
        return folder

    monkeypatch.setattr(api, "list_folders", lambda: [])
    monkeypatch.setattr(api, "create_folder", _create)

    b = FolderBrowser(api)
    b.load()
    assert len(created) == 1
    assert b.folders == created


def test_cli_tree_and_add(app, monkeypatch, capsys):  # noqa: ANN001
    session = _FlaskSession(app.test_client())
    monkeypatch.setattr(
        "folder_viewer.client.FolderApiClient",
        lambda base_url: FolderApiClient(base_url, session=session),
    )

    assert main(["--api-url", BASE_URL, "add", "Docs"]) == 0
    assert "Created Docs" in capsys.readouterr().out

    assert main(["--api-url", BASE_URL, "tree", "--all"]) == 0
    assert capsys.readouterr().out.splitlines() == ["▾ Root Folder", "    Docs"]


def test_cli_reports_unreachable_server(monkeypatch, capsys):  # noqa: ANN001
    monkeypatch.setattr(
        "folder_viewer.client.FolderApiClient",
        lambda base_url: FolderApiClient(base_url, session=_DownSession()),
    )

    assert main(["--api-url", BASE_URL, "tree"]) == 1
    assert LOAD_ERROR_MESSAGE in capsys.readouterr().err
