"""
Derive the visible folder tree from the flat folder list.

The parent -> children index is built in one pass whenever the list changes;
rendering then walks it, descending only into expanded folders.
"""

from __future__ import annotations

from collections import defaultdict
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Union

from .models import Folder, TreeNode

ChildrenIndex = Mapping[Optional[str], List[Folder]]


def build_children_index(folders: Iterable[Folder]) -> Dict[Optional[str], List[Folder]]:
    """Group folders by parent_id, keeping list order within each group."""
    index: Dict[Optional[str], List[Folder]] = defaultdict(list)
    for folder in folders:
        index[folder.parent_id].append(folder)
    return dict(index)


def render_tree(
    folders: Union[ChildrenIndex, Iterable[Folder]],
    expanded: AbstractSet[str],
    parent_id: Optional[str] = None,
) -> List[TreeNode]:
    """
    Return the direct children of parent_id as TreeNodes.

    Accepts the flat folder list or an index from build_children_index.
    A node's children are filled in only when the node is expanded.
    """
    if isinstance(folders, Mapping):
        index = folders
    else:
        index = build_children_index(folders)

    nodes: List[TreeNode] = []
    for folder in index.get(parent_id, []):
        is_expanded = folder.id in expanded
        nodes.append(
            TreeNode(
                id=folder.id,
                name=folder.name,
                parent_id=folder.parent_id,
                has_children=bool(index.get(folder.id)),
                is_expanded=is_expanded,
                children=render_tree(index, expanded, folder.id) if is_expanded else [],
            )
        )
    return nodes


def visible_nodes(nodes: List[TreeNode], depth: int = 0) -> List[tuple[int, TreeNode]]:
    """Flatten rendered nodes depth-first into (depth, node) pairs."""
    rows: List[tuple[int, TreeNode]] = []
    for node in nodes:
        rows.append((depth, node))
        rows.extend(visible_nodes(node.children, depth + 1))
    return rows


def render_text(nodes: List[TreeNode], indent: str = "  ") -> List[str]:
    lines = []
    for depth, node in visible_nodes(nodes):
        if node.has_children:
            arrow = "▾" if node.is_expanded else "▸"
        else:
            arrow = " "
        lines.append(f"{indent * depth}{arrow} {node.name}")
    return lines


def toggle(expanded: AbstractSet[str], folder_id: str) -> frozenset[str]:
    """Flip a folder between collapsed and expanded."""
    if folder_id in expanded:
        return frozenset(expanded - {folder_id})
    return frozenset(expanded | {folder_id})
