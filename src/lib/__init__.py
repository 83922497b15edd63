"""
chromamark - Inline color markup for forum posts

Renders [color=...] markup to sanitized HTML and edits color blocks
relative to a caret or selection.
"""

__version__ = "1.0.0"

from .tokens import token_normalize
from .matcher import BracketMatcher, tags_strip
from .renderer import MarkupRenderer
from .sanitizer import PostSanitizer, narrow_clean
from .cache import RenderCache, cache_getOrCreate, cache_shutdown
from .hooks import HookRegistry, RenderFailure
from .posts import PostParser
from .editor import TextBuffer, TagEditor, ButtonDispatcher
from .formatting import formattingOptions_register
from .log import LOG, state_connectToLogger

__all__ = [
    "token_normalize",
    "BracketMatcher",
    "tags_strip",
    "MarkupRenderer",
    "PostSanitizer",
    "narrow_clean",
    "RenderCache",
    "cache_getOrCreate",
    "cache_shutdown",
    "HookRegistry",
    "RenderFailure",
    "PostParser",
    "TextBuffer",
    "TagEditor",
    "ButtonDispatcher",
    "formattingOptions_register",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
