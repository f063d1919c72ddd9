"""Offset-sorted index tying script comments to the declarations they precede."""

import bisect
from dataclasses import dataclass

from tree_sitter import Node

from sveltedoc.comment_parser import ParsedComment, parse_comment
from sveltedoc.script_parser import ScriptSource, walk


@dataclass
class CommentBlock:
    """One comment block of the script; adjacent line comments are merged."""

    start_byte: int
    end_byte: int
    text: str
    claimed: bool = False


class CommentIndex:
    """Resolves the nearest preceding, not yet claimed, comment block."""

    def __init__(self, source: ScriptSource) -> None:
        """Collect every comment of the script tree once, sorted by offset."""
        self.source = source
        self.blocks: list[CommentBlock] = []
        for node in walk(source.root):
            if node.type == "comment":
                self._add(node)
        self.blocks.sort(key=lambda b: b.start_byte)
        self._ends = [b.end_byte for b in self.blocks]

    def _add(self, node: Node) -> None:
        text = self.source.text_of(node)
        if self.blocks and text.startswith("//"):
            last = self.blocks[-1]
            gap = self.source.data[last.end_byte : node.start_byte]
            adjacent = gap.strip() == b"" and gap.count(b"\n") <= 1
            if last.text.startswith("//") and adjacent:
                last.text = f"{last.text}\n{text}"
                last.end_byte = node.end_byte
                return
        self.blocks.append(CommentBlock(node.start_byte, node.end_byte, text))

    def _preceding(self, start_byte: int) -> CommentBlock | None:
        index = bisect.bisect_right(self._ends, start_byte) - 1
        if index < 0:
            return None
        block = self.blocks[index]
        gap = self.source.data[block.end_byte : start_byte]
        if gap.strip():
            return None
        return block

    def peek(self, node: Node) -> ParsedComment | None:
        """Return the comment directly preceding a node without claiming it."""
        block = self._preceding(node.start_byte)
        if block is None or block.claimed:
            return None
        return self._parse(block)

    def take(self, node: Node) -> ParsedComment | None:
        """Claim and return the comment directly preceding a node."""
        block = self._preceding(node.start_byte)
        if block is None or block.claimed:
            return None
        block.claimed = True
        return self._parse(block)

    def _parse(self, block: CommentBlock) -> ParsedComment:
        loc = self.source.loc_of_bytes(block.start_byte, block.end_byte)
        return parse_comment(block.text, loc)
