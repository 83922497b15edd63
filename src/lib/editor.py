"""
Range-aware color tag editor

Wraps, re-wraps and clears [color=...] blocks in a text buffer relative to
the current caret or selection. Every operation scans the buffer afresh
with BracketMatcher and reduces to a single primitive:

    replace [range_start, range_end) with a literal string, then select an
    absolute range derived from offsets into that string (clamped to its
    length)

Operations are synchronous and run to completion; there is no state kept
between edits beyond the buffer itself.

Example:
    >>> buffer = TextBuffer("[color=blue]abc[/color]", 13, 13)
    >>> TagEditor(buffer).color_apply("green", 13, 13)
    >>> buffer.value, buffer.selection_start, buffer.selection_end
    ('[color=green]abc[/color]', 13, 13)
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..models.markup import PALETTE
from .matcher import BracketMatcher, tags_strip
from .log import LOG


CLOSE_TAG = '[/color]'


def openTag_make(token: str) -> str:
    return f'[color={token}]'


def clamp(number: int, low: int, high: int) -> int:
    return min(max(number, low), high)


@dataclass
class TextBuffer:
    """
    Editable text with a selection

    Attributes:
        value: Buffer contents
        selection_start: Selection start offset
        selection_end: Selection end offset (== start for a collapsed caret)
    """
    value: str = ''
    selection_start: int = 0
    selection_end: int = 0

    @property
    def collapsed(self) -> bool:
        return self.selection_start == self.selection_end

    def range_replace(
        self,
        range_start: int,
        range_end: int,
        replacement: str,
        selection_startOffset: int,
        selection_endOffset: int,
    ) -> None:
        """
        Replace a range and select part of the replacement

        Args:
            range_start: Start of the range to replace
            range_end: End of the range to replace (exclusive)
            replacement: Literal replacement text
            selection_startOffset: New selection start, relative to replacement
            selection_endOffset: New selection end, relative to replacement

        Offsets are clamped to [0, len(replacement)] and the end is never
        placed before the start.
        """
        relative_start = clamp(selection_startOffset, 0, len(replacement))
        relative_end = clamp(selection_endOffset, relative_start, len(replacement))

        self.value = self.value[:range_start] + replacement + self.value[range_end:]
        self.selection_start = range_start + relative_start
        self.selection_end = range_start + relative_end


class TagEditor:
    """
    Color tag operations over a TextBuffer

    A None buffer turns every operation into a no-op.
    """

    def __init__(self, buffer: Optional[TextBuffer]) -> None:
        self.buffer = buffer

    def color_apply(self, token: str, start: int, end: int) -> None:
        """
        Color the caret's block or the selected text

        Collapsed caret inside a block: the block's content is stripped of
        nested color tags and re-wrapped with the new token; the caret lands
        right after the new opening marker.

        Collapsed caret outside any block: an empty open/close pair is
        inserted and the caret placed between the markers.

        Selection: the selected text is stripped of color tags and wrapped;
        the new selection covers exactly the cleaned text.
        """
        if self.buffer is None:
            return

        open_tag = openTag_make(token)
        value = self.buffer.value
        start, end = min(start, end), max(start, end)

        if start == end:
            block = BracketMatcher(value).enclosing_locate(start, start)
            if block is not None:
                clean_inner = tags_strip(value[block.content_start:block.content_end])
                LOG(f"Re-coloring block {block.block_start}-{block.block_end} as {token}", level=3)
                self.buffer.range_replace(
                    block.block_start,
                    block.block_end,
                    f'{open_tag}{clean_inner}{CLOSE_TAG}',
                    len(open_tag),
                    len(open_tag),
                )
                return

            self.buffer.range_replace(
                start, end, f'{open_tag}{CLOSE_TAG}', len(open_tag), len(open_tag)
            )
            return

        selected = tags_strip(value[start:end])
        self.buffer.range_replace(
            start,
            end,
            f'{open_tag}{selected}{CLOSE_TAG}',
            len(open_tag),
            len(open_tag) + len(selected),
        )

    def color_clear(self, start: int, end: int) -> None:
        """
        Remove color from the selection or from the caret's block

        Selection: color tags inside it are stripped in place and the
        cleaned text is selected.

        Collapsed caret inside a block: the block is replaced by its
        de-tagged content and the caret keeps its relative position
        (clamped to the cleaned content's length).

        Collapsed caret outside any block: no-op.
        """
        if self.buffer is None:
            return

        value = self.buffer.value
        start, end = min(start, end), max(start, end)

        if start != end:
            cleaned = tags_strip(value[start:end])
            self.buffer.range_replace(start, end, cleaned, 0, len(cleaned))
            return

        block = BracketMatcher(value).enclosing_locate(start, start)
        if block is None:
            return

        content = tags_strip(value[block.content_start:block.content_end])
        caret_offset = clamp(start - block.content_start, 0, len(content))
        self.buffer.range_replace(
            block.block_start, block.block_end, content, caret_offset, caret_offset
        )


class ButtonDispatcher:
    """
    Formatting-button actions for the color dropdown

    Registers "textcolor:<name>" for every palette color and
    "textcolor:clear". Palette buttons write the palette's hex value as the
    token.
    """

    def __init__(self) -> None:
        self.actions: Dict[str, Callable[[Optional[TextBuffer], int, int], None]] = {}
        for name, css in PALETTE.items():
            self.button_add(f'textcolor:{name}', self.colorAction_make(css))
        self.button_add('textcolor:clear', self.clearAction)

    def button_add(self, name: str, action: Callable[[Optional[TextBuffer], int, int], None]) -> None:
        self.actions[name] = action

    @staticmethod
    def colorAction_make(css: str) -> Callable[[Optional[TextBuffer], int, int], None]:
        def action(buffer: Optional[TextBuffer], start: int, end: int) -> None:
            TagEditor(buffer).color_apply(css, start, end)
        return action

    @staticmethod
    def clearAction(buffer: Optional[TextBuffer], start: int, end: int) -> None:
        TagEditor(buffer).color_clear(start, end)

    def dispatch(self, name: str, buffer: Optional[TextBuffer], start: int, end: int) -> bool:
        """
        Run the action registered for a button

        Returns:
            True if a handler ran, False for an unknown button
        """
        action = self.actions.get(name)
        if action is None:
            return False
        action(buffer, start, end)
        return True
