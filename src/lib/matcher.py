"""
Bracket matcher for [color=...]...[/color] markup

Pairs opening and closing color markers in a single left-to-right scan using
an explicit stack of pending opens. The same matcher backs the server-side
renderer and the range-aware editor.

Pairing rules:
- An opening marker is pushed onto the stack
- A closing marker pops the most recent pending open (LIFO) and emits a block
- A closing marker with an empty stack is literal text
- Opens still on the stack at end of scan are literal text

Blocks are emitted in the order their closing markers appear, so an inner
block is always listed before the block that encloses it.

Example:
    >>> matcher = BracketMatcher("[color=red]a[color=blue]b[/color][/color]")
    >>> [(b.token, b.content_start, b.content_end) for b in matcher.blocks]
    [('blue', 24, 25), ('red', 11, 33)]
"""

import re
from typing import List, Optional

from ..models.markup import MarkupBlock, PendingOpen
from .log import LOG


# Opening marker [color=<token>] (group 1) or closing marker [/color]
COLOR_TAG_RE = re.compile(r'\[color=([^\]]+)\]|\[/color\]', re.IGNORECASE)

# Any color marker, used when stripping tags out of a span of text
COLOR_TAG_STRIP_RE = re.compile(r'\[/?color(?:=[^\]]+)?\]', re.IGNORECASE)


def tags_strip(text: Optional[str]) -> str:
    """
    Remove every color marker from text

    Both opening and closing markers are removed textually, matched or not.
    All other characters keep their relative order.

    Example:
        >>> tags_strip("a[color=red]b[/color]c[/color]")
        'abc'
    """
    return COLOR_TAG_STRIP_RE.sub('', str(text or ''))


class BracketMatcher:
    """
    Stack-based matcher for color markers in a text buffer

    Scanning happens once, at construction. Each instance describes exactly
    one buffer; callers scan again after every edit.
    """

    def __init__(self, text: str) -> None:
        """
        Scan text and record every matched block

        Args:
            text: Buffer to scan

        Attributes:
            text: Scanned buffer
            blocks: Matched blocks in closing-marker order
        """
        self.text = text or ''
        self.blocks: List[MarkupBlock] = self.blocks_scan(self.text)

    @staticmethod
    def blocks_scan(text: str) -> List[MarkupBlock]:
        """
        Pair opening and closing markers with LIFO stack discipline

        Args:
            text: Buffer to scan

        Returns:
            List of MarkupBlock in the order their closing markers appear

        Example:
            For "[/color][color=red]x[/color][color=blue]":
            - leading [/color] is ignored (empty stack)
            - [color=red]x[/color] becomes a block
            - trailing [color=blue] never closes and is dropped
        """
        stack: List[PendingOpen] = []
        blocks: List[MarkupBlock] = []

        for match in COLOR_TAG_RE.finditer(text):
            token = match.group(1)
            if token is not None:
                stack.append(PendingOpen(
                    position=match.start(),
                    length=match.end() - match.start(),
                    token=token,
                ))
                continue

            if not stack:
                LOG(f"Stray close marker at {match.start()}", level=3)
                continue

            opening = stack.pop()
            blocks.append(MarkupBlock(
                block_start=opening.position,
                block_end=match.end(),
                content_start=opening.position + opening.length,
                content_end=match.start(),
                token=opening.token,
            ))

        if stack:
            LOG(f"{len(stack)} unmatched open marker(s) left as text", level=3)

        return blocks

    def enclosing_locate(self, start: int, end: int) -> Optional[MarkupBlock]:
        """
        Find the innermost block whose content contains [start, end]

        Args:
            start: Range start (order with end does not matter)
            end: Range end

        Returns:
            Block with the smallest content span containing the range, or
            None if no block qualifies
        """
        range_start = min(start, end)
        range_end = max(start, end)

        innermost: Optional[MarkupBlock] = None
        for block in self.blocks:
            if not block.range_contains(range_start, range_end):
                continue
            if innermost is None or block.content_length < innermost.content_length:
                innermost = block
        return innermost

    def outermost_list(self) -> List[MarkupBlock]:
        """
        Return blocks not nested in any other block, ordered by position

        LIFO pairing guarantees matched blocks never partially overlap, so a
        block is outermost exactly when no other block's span contains it.
        """
        ordered = sorted(self.blocks, key=lambda b: b.block_start)
        outermost: List[MarkupBlock] = []
        for block in ordered:
            if outermost and block.block_end <= outermost[-1].block_end:
                continue
            outermost.append(block)
        return outermost
