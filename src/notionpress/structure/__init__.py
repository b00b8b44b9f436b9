"""Heading-tree construction for collapsible-outline publishing."""

from notionpress.structure.heading_tree import build_toggle_structure

__all__ = [
    "build_toggle_structure",
]
