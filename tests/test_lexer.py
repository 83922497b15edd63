"""
Lexer tests - highlighting color markup source
"""

from pygments.token import Literal, Name, Punctuation, Text

from chromamark.lib.lexer import ColorMarkupLexer


def tokens_of(source):
    return [(ttype, value) for ttype, value in ColorMarkupLexer().get_tokens(source) if value.strip()]


class TestColorMarkupLexer:
    """Token types for markers, HTML and text"""

    def test_open_marker(self):
        tokens = tokens_of("[color=red]")
        assert tokens == [
            (Punctuation, "["),
            (Name.Tag, "color"),
            (Punctuation, "="),
            (Literal, "red"),
            (Punctuation, "]"),
        ]

    def test_close_marker(self):
        tokens = tokens_of("[/color]")
        assert tokens == [
            (Punctuation, "["),
            (Punctuation, "/"),
            (Name.Tag, "color"),
            (Punctuation, "]"),
        ]

    def test_block_with_text(self):
        tokens = tokens_of("[color=#00ff00]Hi[/color]")
        assert (Literal, "#00ff00") in tokens
        assert (Text, "Hi") in tokens

    def test_html_tag(self):
        tokens = tokens_of("<b>x</b>")
        assert tokens == [(Name.Builtin, "<b>"), (Text, "x"), (Name.Builtin, "</b>")]

    def test_lone_bracket_is_text(self):
        tokens = tokens_of("a [b")
        assert all(ttype is Text for ttype, _ in tokens)

    def test_markers_case_insensitive(self):
        tokens = tokens_of("[COLOR=Red]x[/COLOR]")
        assert (Name.Tag, "COLOR") in tokens
        assert (Literal, "Red") in tokens

    def test_metadata(self):
        assert ColorMarkupLexer.name == "ColorMarkup"
        assert "colormarkup" in ColorMarkupLexer.aliases
