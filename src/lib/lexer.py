"""
Custom Pygments lexer for color markup source

Highlights [color=...] / [/color] markers when showing raw post source.

Token types:
- Name.Tag: The "color" keyword in a marker
- Punctuation: Brackets, '=' and '/'
- Literal: The color token (e.g., red, #00ff00)
- Name.Builtin: Raw HTML tags (passed through as-is)
- Text: Everything else
"""

import re

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    Literal,
)


class ColorMarkupLexer(RegexLexer):
    """
    Lexer for post source containing color markup

    Example:
        [color=red]Hi[/color]

    Tokens:
        [ → Punctuation
        color → Name.Tag
        = → Punctuation
        red → Literal
        ] → Punctuation
        Hi → Text
    """

    name = 'ColorMarkup'
    aliases = ['colormarkup', 'color-markup']
    filenames = ['*.cmark']

    tokens = {
        'root': [
            # Opening marker
            (r'(\[)(color)(=)([^\]]+)(\])',
             bygroups(Punctuation, Name.Tag, Punctuation, Literal, Punctuation)),

            # Closing marker
            (r'(\[)(/)(color)(\])',
             bygroups(Punctuation, Punctuation, Name.Tag, Punctuation)),

            # HTML tags (pass through as-is)
            (r'<[^>]+>', Name.Builtin),

            # Plain text up to the next marker or tag
            (r'[^\[<]+', Text),

            # Lone bracket or angle that starts nothing
            (r'[\[<]', Text),
        ],
    }

    flags = re.IGNORECASE | re.MULTILINE
