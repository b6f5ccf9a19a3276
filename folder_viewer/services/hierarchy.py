"""
Hierarchy service: the folder tree's invariants on top of FolderStorage.

- exactly one root folder (parent_id is None)
- folders are only created under an existing parent
- the root is never deleted
- only leaf folders are deleted
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from .models import Folder
from .storage import FolderStorage

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "Root Folder"


class HierarchyService:
    def __init__(self, storage: FolderStorage, root_name: str = DEFAULT_ROOT_NAME):
        self.storage = storage
        self.root_name = root_name

    def list_all(self) -> List[Folder]:
        return self.storage.list_all()

    def ensure_root(self) -> Folder:
        """Return the root folder, creating it on first access."""
        root = self.storage.find_root()
        if root is not None:
            return root

        try:
            root = self.storage.insert(self.root_name, parent_id=None)
        except ConflictError:
            # Another request created the root first.
            root = self.storage.find_root()
            if root is None:
                raise
            return root

        logger.info("Created root folder %s", root.id)
        return root

    def create(self, name: Any, parent_id: Optional[str] = None) -> Folder:
        """
        Create a folder under parent_id.

        Raises:
            ValidationError: name is missing/blank, the parent does not exist,
                or parent_id is None while a root already exists.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Folder name is required.")
        name = name.strip()

        if parent_id is None:
            if self.storage.find_root() is not None:
                raise ValidationError("A root folder already exists; a parentId is required.")
        elif not isinstance(parent_id, str) or self.storage.get(parent_id) is None:
            raise ValidationError(f"Parent folder {parent_id} does not exist.")

        try:
            folder = self.storage.insert(name, parent_id=parent_id)
        except ConflictError:
            if parent_id is None:
                raise ValidationError("A root folder already exists; a parentId is required.")
            raise

        logger.info("Created folder %s (%r) under %s", folder.id, folder.name, parent_id)
        return folder

    def delete(self, folder_id: str) -> None:
        """
        Delete a leaf folder.

        Raises:
            NotFoundError: no folder with that id.
            ForbiddenError: the folder is the root.
            ConflictError: the folder has children.
        """
        target = self.storage.get(folder_id)
        if target is None:
            raise NotFoundError("Folder not found.")

        root = self.storage.find_root()
        if target.is_root or (root is not None and root.id == target.id):
            logger.warning("Refused to delete root folder %s", folder_id)
            raise ForbiddenError("The root folder cannot be deleted.")

        if self.storage.has_children(folder_id):
            logger.info("Refused to delete non-empty folder %s", folder_id)
            raise ConflictError("Cannot delete a folder that contains other folders.")

        # A child created since the check above makes this a no-op.
        if not self.storage.delete_leaf(folder_id):
            if self.storage.get(folder_id) is None:
                raise NotFoundError("Folder not found.")
            raise ConflictError("Cannot delete a folder that contains other folders.")

        logger.info("Deleted folder %s", folder_id)
