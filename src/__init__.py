"""
chromamark - Inline color markup for forum posts

Renders [color=...] markup to sanitized HTML spans, caches rendered posts,
and provides the range-aware editing operations behind the composer's
color buttons.
"""

__version__ = "1.0.0"

from .lib import (
    MarkupRenderer,
    PostParser,
    PostSanitizer,
    RenderCache,
    TagEditor,
    TextBuffer,
    narrow_clean,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "MarkupRenderer",
    "PostParser",
    "PostSanitizer",
    "RenderCache",
    "TagEditor",
    "TextBuffer",
    "narrow_clean",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
