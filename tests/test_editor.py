"""
Tag editor tests - applying and clearing color around a caret or selection

Offsets below are absolute character positions in the buffer; "[color=red]"
is 11 characters long, "[color=blue]" and "[color=#0f0]" are 12.
"""

import pytest

from chromamark.lib.editor import ButtonDispatcher, TagEditor, TextBuffer


NESTED = "[color=red]a[color=blue]b[/color]c[/color]"


def editor_for(value: str, start: int, end: int):
    buffer = TextBuffer(value, start, end)
    return buffer, TagEditor(buffer)


def state(buffer: TextBuffer):
    return buffer.value, buffer.selection_start, buffer.selection_end


class TestApplyColor:
    """color_apply() with a caret or a selection"""

    def test_caret_inside_block_recolors(self):
        buffer, editor = editor_for("[color=blue]abc[/color]", 13, 13)
        editor.color_apply("green", 13, 13)
        assert state(buffer) == ("[color=green]abc[/color]", 13, 13)

    def test_caret_inside_nested_block_strips_inner_markers(self):
        buffer, editor = editor_for(NESTED, 11, 11)
        editor.color_apply("green", 11, 11)
        assert state(buffer) == ("[color=green]abc[/color]", 13, 13)

    def test_caret_picks_innermost_block(self):
        buffer, editor = editor_for(NESTED, 25, 25)
        editor.color_apply("red", 25, 25)
        assert state(buffer) == ("[color=red]a[color=red]b[/color]c[/color]", 23, 23)

    def test_caret_outside_block_inserts_pair(self):
        buffer, editor = editor_for("hello", 5, 5)
        editor.color_apply("red", 5, 5)
        assert state(buffer) == ("hello[color=red][/color]", 16, 16)

    def test_selection_wrapped(self):
        buffer, editor = editor_for("say hello now", 4, 9)
        editor.color_apply("#0f0", 4, 9)
        assert state(buffer) == ("say [color=#0f0]hello[/color] now", 16, 21)
        assert buffer.value[16:21] == "hello"

    def test_reversed_selection(self):
        buffer, editor = editor_for("say hello now", 9, 4)
        editor.color_apply("#0f0", 9, 4)
        assert state(buffer) == ("say [color=#0f0]hello[/color] now", 16, 21)

    def test_selection_markers_stripped(self):
        buffer, editor = editor_for("x[color=red]ab[/color]y", 0, 23)
        editor.color_apply("blue", 0, 23)
        assert state(buffer) == ("[color=blue]xaby[/color]", 12, 16)


class TestClearColor:
    """color_clear() with a caret or a selection"""

    def test_caret_inside_block_unwraps(self):
        buffer, editor = editor_for("hi [color=red]abc[/color] there", 16, 16)
        editor.color_clear(16, 16)
        assert state(buffer) == ("hi abc there", 5, 5)

    def test_caret_inside_nested_block_unwraps_innermost(self):
        buffer, editor = editor_for(NESTED, 25, 25)
        editor.color_clear(25, 25)
        assert state(buffer) == ("[color=red]abc[/color]", 13, 13)

    def test_selection_stripped_in_place(self):
        buffer, editor = editor_for("[color=red]ab[/color] z", 0, 21)
        editor.color_clear(0, 21)
        assert state(buffer) == ("ab z", 0, 2)

    def test_caret_outside_block_is_noop(self):
        buffer, editor = editor_for("plain [color=red]x[/color]", 2, 2)
        editor.color_clear(2, 2)
        assert state(buffer) == ("plain [color=red]x[/color]", 2, 2)

    def test_caret_in_empty_buffer_is_noop(self):
        buffer, editor = editor_for("", 0, 0)
        editor.color_clear(0, 0)
        assert state(buffer) == ("", 0, 0)


class TestNoBuffer:
    """A missing buffer makes every operation a no-op"""

    def test_apply_and_clear(self):
        editor = TagEditor(None)
        editor.color_apply("red", 0, 0)
        editor.color_clear(0, 3)


class TestRangeReplace:
    """The single editing primitive"""

    def test_offsets_clamped(self):
        buffer = TextBuffer("abc", 0, 0)
        buffer.range_replace(1, 2, "XY", -3, 10)
        assert state(buffer) == ("aXYc", 1, 3)

    def test_end_never_before_start(self):
        buffer = TextBuffer("abc", 0, 0)
        buffer.range_replace(0, 0, "XYZ", 2, 1)
        assert state(buffer) == ("XYZabc", 2, 2)
        assert buffer.collapsed


class TestButtonDispatcher:
    """Formatting buttons mapped to editor actions"""

    @pytest.fixture
    def dispatcher(self):
        return ButtonDispatcher()

    def test_palette_button_uses_hex(self, dispatcher):
        buffer = TextBuffer("hello", 0, 5)
        assert dispatcher.dispatch("textcolor:red", buffer, 0, 5) is True
        assert buffer.value == "[color=#d92b2b]hello[/color]"

    def test_clear_button(self, dispatcher):
        buffer = TextBuffer("[color=red]x[/color]", 12, 12)
        assert dispatcher.dispatch("textcolor:clear", buffer, 12, 12) is True
        assert buffer.value == "x"

    def test_unknown_button(self, dispatcher):
        buffer = TextBuffer("hello", 0, 5)
        assert dispatcher.dispatch("textcolor:plaid", buffer, 0, 5) is False
        assert buffer.value == "hello"

    def test_every_palette_color_registered(self, dispatcher):
        assert len(dispatcher.actions) == 12
        assert "textcolor:black" in dispatcher.actions
