"""
HTTP client and browser state for the folder viewer.

FolderApiClient wraps the REST API. FolderBrowser holds what a viewer keeps
between requests: the cached flat folder list, the set of expanded folder ids,
and the error shown when the initial load fails. After the first load,
mutations patch the cached list instead of re-fetching it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import requests

from .config import Config
from .services.models import Folder, TreeNode
from .services.tree_builder import build_children_index, render_text, render_tree, toggle

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not connect to the server. Please ensure the backend is running."


class FolderApiError(Exception):
    """Non-2xx response or transport failure talking to the API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FolderApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.base_url = (base_url or Config.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def list_folders(self) -> List[Folder]:
        payload = self._request("GET", "/api/folders")
        return [Folder.model_validate(item) for item in payload]

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Folder:
        payload = self._request("POST", "/api/folders", json={"name": name, "parentId": parent_id})
        return Folder.model_validate(payload)

    def delete_folder(self, folder_id: str) -> str:
        payload = self._request("DELETE", f"/api/folders/{folder_id}")
        return payload.get("message", "")

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise FolderApiError(f"Request to {url} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise FolderApiError(message or f"HTTP {response.status_code}", response.status_code)

        return payload


class FolderBrowser:
    """
    Client-side view of the folder tree.

    Every node starts collapsed. The children index is rebuilt whenever the
    cached list changes.
    """

    def __init__(self, api: FolderApiClient):
        self.api = api
        self.folders: List[Folder] = []
        self.expanded: frozenset[str] = frozenset()
        self.error: Optional[str] = None
        self.loaded = False
        self._index = {}

    def load(self) -> None:
        """Fetch the folder list once. A failure is kept in self.error until the next load()."""
        try:
            folders = self.api.list_folders()
        except FolderApiError as e:
            logger.error("Initial folder load failed: %s", e.message)
            self.error = LOAD_ERROR_MESSAGE
            self.loaded = True
            return

        if not any(folder.is_root for folder in folders):
            # Older servers do not create the root on read.
            try:
                folders = [self.api.create_folder(Config.ROOT_FOLDER_NAME, None), *folders]
            except FolderApiError as e:
                logger.error("Error creating root folder: %s", e.message)

        self.error = None
        self.loaded = True
        self._set_folders(folders)

    def toggle(self, folder_id: str) -> None:
        self.expanded = toggle(self.expanded, folder_id)

    def add_folder(self, name: str, parent_id: Optional[str]) -> Folder:
        """
        Create a folder and append it locally; the parent is expanded to show it.

        Raises:
            FolderApiError: the server rejected the folder or was unreachable.
        """
        folder = self.api.create_folder(name, parent_id)
        self._set_folders([*self.folders, folder])
        if parent_id is not None:
            self.expanded = self.expanded | {parent_id}
        return folder

    def delete_folder(self, folder_id: str) -> str:
        """
        Delete a folder and drop it from the local list.

        Raises:
            FolderApiError: the server refused the delete or was unreachable.
        """
        message = self.api.delete_folder(folder_id)
        self._set_folders([f for f in self.folders if f.id != folder_id])
        self.expanded = self.expanded - {folder_id}
        return message

    def tree(self, parent_id: Optional[str] = None) -> List[TreeNode]:
        return render_tree(self._index, self.expanded, parent_id)

    def render(self) -> str:
        if not self.loaded:
            return "Loading folders..."
        if self.error:
            return f"Error: {self.error}"
        return "\n".join(render_text(self.tree()))

    def _set_folders(self, folders: List[Folder]) -> None:
        self.folders = folders
        self._index = build_children_index(folders)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Folder Structure Viewer client")
    parser.add_argument("--api-url", default=Config.API_URL, help="Base URL of the folder API")
    sub = parser.add_subparsers(dest="command", required=True)

    tree_cmd = sub.add_parser("tree", help="Print the folder tree")
    tree_cmd.add_argument("--expand", action="append", default=[], metavar="ID", help="Expand a folder")
    tree_cmd.add_argument("--all", action="store_true", help="Expand every folder")

    add_cmd = sub.add_parser("add", help="Add a folder")
    add_cmd.add_argument("name")
    add_cmd.add_argument("--parent", help="Parent folder id (defaults to the root)")

    del_cmd = sub.add_parser("delete", help="Delete a leaf folder")
    del_cmd.add_argument("id")

    args = parser.parse_args(argv)
    browser = FolderBrowser(FolderApiClient(args.api_url))
    browser.load()
    if browser.error:
        print(browser.render(), file=sys.stderr)
        return 1

    try:
        if args.command == "add":
            parent_id = args.parent
            if parent_id is None:
                parent_id = next((f.id for f in browser.folders if f.is_root), None)
            folder = browser.add_folder(args.name, parent_id)
            print(f"Created {folder.name} ({folder.id})")
        elif args.command == "delete":
            print(browser.delete_folder(args.id))
        else:
            expand = [f.id for f in browser.folders] if args.all else args.expand
            for folder_id in expand:
                browser.toggle(folder_id)
            print(browser.render())
    except FolderApiError as e:
        print(f"Failed: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
