"""
Models package for chromamark

Contains data structures and type definitions for rendering and editing.
"""

from .state import ProgramState, pipeline
from .markup import ColorToken, MarkupBlock, PendingOpen, PALETTE, NARROW_COLOR_NAMES
from .content import ContentVariant, PostData, RenderPayload, HookSpec
from .sanitize import SanitizeConfig

__all__ = [
    "ProgramState",
    "pipeline",
    "ColorToken",
    "MarkupBlock",
    "PendingOpen",
    "PALETTE",
    "NARROW_COLOR_NAMES",
    "ContentVariant",
    "PostData",
    "RenderPayload",
    "HookSpec",
    "SanitizeConfig",
]
