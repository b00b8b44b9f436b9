"""Regroup a flat block sequence into a heading forest.

Outline mode publishes every heading as a toggleable block that owns the
content following it.  :func:`build_toggle_structure` performs one
left-to-right pass with an explicit stack of open headings:

* a non-heading block is appended to the ``children`` of the heading on top
  of the stack, or to ``orphan_blocks`` while no heading has been seen;
* a heading of level ``L`` first pops every open heading whose level is
  ``>= L``, then attaches to the new top's ``sub_headings`` (or to
  ``root_nodes`` when the stack is empty) and is pushed.

Levels on the stack are therefore strictly increasing from bottom to top,
and sibling headings close each other's scope.  No recursion is involved,
so arbitrarily deep outlines are safe.
"""

from __future__ import annotations

from notionpress.models import Block, HeadingBlock, HeadingNode, ToggleStructure


def build_toggle_structure(blocks: list[Block]) -> ToggleStructure:
    """Build the :class:`ToggleStructure` of a flat block list.

    Parameters
    ----------
    blocks:
        Blocks in document order, as produced by the converter.

    Returns
    -------
    ToggleStructure
        Root heading nodes and the blocks preceding the first heading.
    """
    structure = ToggleStructure()
    stack: list[HeadingNode] = []

    for block in blocks:
        if not isinstance(block, HeadingBlock):
            if stack:
                stack[-1].children.append(block)
            else:
                structure.orphan_blocks.append(block)
            continue

        while stack and stack[-1].level >= block.level:
            stack.pop()

        node = HeadingNode(level=block.level, heading=block)
        if stack:
            stack[-1].sub_headings.append(node)
        else:
            structure.root_nodes.append(node)
        stack.append(node)

    return structure

