"""
Sanitizer configuration model

SanitizeConfig is extended during a one-time registration phase and then
frozen for the rest of the process lifetime.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Set


@dataclass
class SanitizeConfig:
    """
    Allow-lists consumed by the broad post sanitizer

    Attributes:
        allowed_tags: Tag names that survive sanitization
        allowed_attributes: Tag name -> attribute names allowed on that tag
                            ("data-*" / "aria-*" match by prefix)
        allowed_classes: Optional tag name -> class names; tags absent from
                         this map keep any class
        non_boolean_attributes: Global attributes merged onto every allowed
                                tag by global_attributes_merge()
        allowed_schemes: URL schemes permitted in href/src
    """
    allowed_tags: Set[str] = field(default_factory=set)
    allowed_attributes: Dict[str, Set[str]] = field(default_factory=dict)
    allowed_classes: Dict[str, Set[str]] = field(default_factory=dict)
    non_boolean_attributes: Set[str] = field(default_factory=set)
    allowed_schemes: List[str] = field(default_factory=list)
    frozen: bool = field(default=False, repr=False)

    def __setattr__(self, name, value):
        if getattr(self, 'frozen', False):
            raise RuntimeError(f"SanitizeConfig is frozen; cannot set '{name}'")
        super().__setattr__(name, value)

    def tags_allow(self, *tags: str) -> None:
        """Add tags to the allow-list (registration phase only)"""
        self.frozen_check()
        self.allowed_tags.update(tags)

    def attributes_allow(self, tag: str, *attributes: str) -> None:
        """Allow attributes on a tag (registration phase only)"""
        self.frozen_check()
        self.allowed_attributes.setdefault(tag, set()).update(attributes)

    def global_attributes_merge(self) -> None:
        """Union the global non-boolean attributes onto every allowed tag"""
        self.frozen_check()
        for tag in self.allowed_tags:
            self.allowed_attributes.setdefault(tag, set()).update(self.non_boolean_attributes)

    def freeze(self) -> None:
        """End the registration phase; the allow-lists become read-only"""
        self.allowed_tags = frozenset(self.allowed_tags)
        self.allowed_attributes = MappingProxyType({
            tag: frozenset(attrs) for tag, attrs in self.allowed_attributes.items()
        })
        self.allowed_classes = MappingProxyType({
            tag: frozenset(classes) for tag, classes in self.allowed_classes.items()
        })
        self.non_boolean_attributes = frozenset(self.non_boolean_attributes)
        self.allowed_schemes = tuple(self.allowed_schemes)
        self.frozen = True

    def frozen_check(self) -> None:
        if self.frozen:
            raise RuntimeError("SanitizeConfig is frozen; register before first render")
