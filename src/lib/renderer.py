"""
Renderer for [color=...] markup to HTML spans

Converts matched color blocks into styled spans. Works inside-out: a block's
inner content is rendered first, then wrapped (valid token) or emitted bare
(invalid token).

The renderer does not escape text and emits no bracket syntax of its own,
so running it over its own output is a no-op. Escaping and allow-listing are
left to the sanitizer stage that runs after it.

Example:
    >>> MarkupRenderer().render("[color=red]hi[/color]")
    '<span class="nbb-text-color" data-color="red" style="color: #d92b2b;">hi</span>'
"""

from typing import Any, List

from ..models.markup import ColorToken
from .matcher import BracketMatcher
from .tokens import token_normalize
from .log import LOG


OPEN_MARKER_HINT = '[color='


class MarkupRenderer:
    """
    Recursive color-markup renderer

    Pairing follows BracketMatcher (LIFO); unmatched markers pass through
    as literal text.
    """

    span_class = 'nbb-text-color'

    def render(self, content: Any) -> Any:
        """
        Render all color blocks in content

        Args:
            content: Raw post content; non-strings are returned untouched

        Returns:
            Content with every valid block turned into a span and every
            invalid block unwrapped
        """
        if not content or not isinstance(content, str):
            return content
        if OPEN_MARKER_HINT not in content.lower():
            return content
        return self.blocks_render(content)

    def blocks_render(self, text: str) -> str:
        """
        Render the outermost blocks of text, recursing into their content

        Args:
            text: Text to scan

        Returns:
            Rendered text
        """
        matcher = BracketMatcher(text)
        if not matcher.blocks:
            return text

        parts: List[str] = []
        cursor = 0
        for block in matcher.outermost_list():
            parts.append(text[cursor:block.block_start])

            inner = self.blocks_render(text[block.content_start:block.content_end])
            color = token_normalize(block.token)
            if color is None:
                LOG(f"Unwrapping block with invalid token '{block.token}'", level=3)
                parts.append(inner)
            else:
                parts.append(self.span_wrap(color, inner))

            cursor = block.block_end

        parts.append(text[cursor:])
        return ''.join(parts)

    def span_wrap(self, color: ColorToken, inner: str) -> str:
        """Wrap rendered inner content in the canonical color span"""
        return (
            f'<span class="{self.span_class}" data-color="{color.attr}" '
            f'style="color: {color.css};">{inner}</span>'
        )


def textColorTokens_render(content: Any) -> Any:
    """Render color markup with a default MarkupRenderer"""
    return MarkupRenderer().render(content)
