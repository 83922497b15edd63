"""
Markup-specific data models

Type-safe structures for color tokens, the named palette and the blocks
produced by the bracket matcher.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


# Named palette: token name -> emitted css color
PALETTE: Mapping[str, str] = MappingProxyType({
    'red': '#d92b2b',
    'orange': '#e96310',
    'yellow': '#e5b70a',
    'green': '#1f9d55',
    'teal': '#1aa39a',
    'blue': '#2474b5',
    'indigo': '#5856d6',
    'purple': '#a32cc4',
    'pink': '#d63384',
    'gray': '#6c757d',
    'black': '#111111',
})

# Class names the narrow sanitizer keeps on <span> (text-color-<name>)
NARROW_COLOR_NAMES: Tuple[str, ...] = (
    'black', 'gray', 'red', 'orange', 'yellow', 'lime',
    'green', 'teal', 'cyan', 'blue', 'indigo', 'violet',
)


@dataclass(frozen=True)
class ColorToken:
    """
    A validated author color token

    Returned by tokens.token_normalize() for input that is either a palette
    name or a #RGB / #RRGGBB hex code. Invalid input never becomes a
    ColorToken.

    Attributes:
        attr: Normalized (trimmed, lower-cased) token as written by the author
        css: Concrete color value emitted in the style attribute

    Example:
        "  Blue " -> ColorToken(attr="blue", css="#2474b5")
        "#ABC"    -> ColorToken(attr="#abc", css="#abc")
    """
    attr: str
    css: str


@dataclass(frozen=True)
class MarkupBlock:
    """
    A matched [color=...]...[/color] pair inside a text buffer

    All offsets are half-open character positions into the scanned buffer.

    Attributes:
        block_start: Position of the opening marker's '['
        block_end: Position just past the closing marker's ']'
        content_start: Position just past the opening marker
        content_end: Position of the closing marker's '['
        token: Raw token text from the opening marker (unvalidated)

    Example:
        For buffer "x[color=red]ab[/color]":
        MarkupBlock(block_start=1, block_end=22, content_start=12,
                    content_end=14, token="red")
    """
    block_start: int
    block_end: int
    content_start: int
    content_end: int
    token: str = ''

    @property
    def content_length(self) -> int:
        return self.content_end - self.content_start

    def range_contains(self, start: int, end: int) -> bool:
        """Check if [start, end] lies within this block's content span"""
        return self.content_start <= start and end <= self.content_end


@dataclass
class PendingOpen:
    """An opening marker waiting on the matcher stack for its close"""
    position: int
    length: int
    token: str
