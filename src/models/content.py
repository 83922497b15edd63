"""
Content and render-pipeline models

Defines the content variants used as cache keys, the post payload shared by
pipeline stages, and the record used to register hook stages.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class ContentVariant(Enum):
    """
    Named rendering modes for content

    Part of every cache key; a post rendered as DEFAULT and as PLAINTEXT
    produces two independent cache entries.
    """
    DEFAULT = "default"
    PLAINTEXT = "plaintext"
    NOTE = "activitypub.note"         # structured note
    ARTICLE = "activitypub.article"   # structured article
    MARKDOWN = "markdown"

    @classmethod
    def coerce(cls, value: Any) -> "ContentVariant":
        """
        Map a variant name (or member) to a ContentVariant

        Unknown or missing values fall back to DEFAULT.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT


@dataclass
class PostData:
    """
    A post as seen by the parsing facade

    Attributes:
        pid: Stable content identifier, or None for drafts/previews
             (content without a pid is never cached)
        content: Current (possibly already rendered) content
        source_content: Raw author source; preferred over content when set
    """
    pid: Optional[str] = None
    content: str = ""
    source_content: Optional[str] = None


@dataclass
class RenderPayload:
    """
    Mutable payload passed from stage to stage in a render pipeline

    Attributes:
        content: Text being transformed
        variant: Rendering mode for this request
        post: Owning post, when the render is for a stored post
    """
    content: str
    variant: ContentVariant = ContentVariant.DEFAULT
    post: Optional[PostData] = None


@dataclass
class HookSpec:
    """
    Registration record for one pipeline stage

    Attributes:
        hook: Hook name (e.g., "filter:parse.post")
        method: Stage callable, payload -> payload (sync or async)
        priority: Lower runs first; ties keep registration order
        owner: Who registered the stage (e.g., "core")
    """
    hook: str
    method: Callable[[Any], Any]
    priority: int = 10
    owner: str = "core"
    order: int = field(default=0, compare=False)
