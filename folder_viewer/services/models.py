"""
Data models for the folder hierarchy.

Uses Pydantic for validation and serialization. Field aliases give the
camelCase JSON shape browsers expect (`parentId`, `createdAt`).
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class Folder(BaseModel):
    """A named node in the hierarchy; parent_id is None for the root."""
    id: str
    name: str
    parent_id: Optional[str] = Field(None, alias="parentId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class TreeNode(BaseModel):
    """Folder as seen by the tree view"""
    id: str
    name: str
    parent_id: Optional[str] = None
    has_children: bool = False
    is_expanded: bool = False
    children: List['TreeNode'] = Field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


# Update forward references for recursive models
TreeNode.model_rebuild()
