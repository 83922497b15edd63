"""
HTML sanitizers for rendered content

Two tiers, both built on bleach:

- PostSanitizer: broad allow-list for full post rendering. Structural and
  formatting tags plus media embeds, per-tag attributes, and global
  non-boolean attributes (style, class, id, data-*, aria-*, ...) merged onto
  every allowed tag. Extensible through the "filter:sanitize.config" hook
  until configure() freezes the config. A plaintext mode strips every tag.
- narrow_clean(): small fixed allow-list for constrained contexts. No inline
  styles at all; <span> keeps only text-color-<name> classes.

Disallowed tags are unwrapped (their text survives) and disallowed
attributes are dropped one by one. Non-text tags (script, style, textarea,
option, noscript) are the exception: unless allowed, they are removed
together with their content.

Example:
    >>> narrow_clean('<span class="foo text-color-blue bar">X</span>')
    '<span class="text-color-blue">X</span>'
"""

import re
from functools import partial
from typing import Callable, Iterable, Optional, Pattern, TYPE_CHECKING

from bleach.css_sanitizer import CSSSanitizer
from bleach.html5lib_shim import BleachHTMLParser, Filter
from bleach.sanitizer import Cleaner

from ..config import appsettings
from ..models.markup import NARROW_COLOR_NAMES
from ..models.sanitize import SanitizeConfig
from .log import LOG

if TYPE_CHECKING:
    from .hooks import HookRegistry


# Tags permitted by the underlying engine's defaults for forum content
BASE_ALLOWED_TAGS = (
    'address', 'article', 'aside', 'footer', 'header',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'hgroup', 'main', 'nav', 'section',
    'blockquote', 'dd', 'div', 'dl', 'dt', 'figcaption', 'figure', 'hr', 'li',
    'ol', 'p', 'pre', 'ul', 'a', 'abbr', 'b', 'bdi', 'bdo', 'br', 'cite',
    'code', 'data', 'dfn', 'em', 'i', 'kbd', 'mark', 'q', 'rb', 'rp', 'rt',
    'rtc', 'ruby', 's', 'samp', 'small', 'span', 'strong', 'sub', 'sup',
    'time', 'u', 'var', 'wbr', 'caption', 'col', 'colgroup', 'table', 'tbody',
    'td', 'tfoot', 'th', 'thead', 'tr',
)

# Safe-to-use additions for embedded media and edits
EXTRA_ALLOWED_TAGS = (
    'ins', 'del', 'img', 'button',
    'video', 'audio', 'source', 'iframe', 'embed',
)

BASE_ALLOWED_ATTRIBUTES = {
    'a': ('href', 'name', 'hreflang', 'media', 'rel', 'target', 'type'),
    'img': ('alt', 'height', 'ismap', 'src', 'usemap', 'width', 'srcset'),
    'iframe': ('height', 'name', 'src', 'width', 'allow', 'frameborder'),
    'video': ('autoplay', 'playsinline', 'controls', 'height', 'loop', 'muted',
              'poster', 'preload', 'src', 'width'),
    'audio': ('autoplay', 'controls', 'loop', 'muted', 'preload', 'src'),
    'source': ('type', 'src', 'srcset', 'sizes', 'media', 'height', 'width'),
    'embed': ('height', 'src', 'type', 'width'),
}

NON_BOOLEAN_ATTRIBUTES = (
    'accesskey', 'class', 'contenteditable', 'dir', 'draggable', 'dropzone',
    'hidden', 'id', 'lang', 'spellcheck', 'style', 'tabindex', 'title',
    'translate', 'aria-*', 'data-*',
)

NARROW_ALLOWED_TAGS = (
    'a', 'b', 'i', 'u', 'em', 'strong', 'code', 'pre',
    'blockquote', 'ul', 'ol', 'li', 'p', 'br', 'span',
)

NARROW_ALLOWED_ATTRIBUTES = {
    'a': ['href', 'name', 'target', 'rel'],
    'span': ['class'],
}

COLOR_CLASS_RE = re.compile(r'^text-color-(' + '|'.join(NARROW_COLOR_NAMES) + r')$')

# Tags whose content is never meaningful text
NON_TEXT_TAGS = ('script', 'style', 'textarea', 'option', 'noscript')


class NonTextFilter(Filter):
    """
    html5lib filter that drops non-text elements along with their content

    Runs on the parsed tree before bleach's sanitizing pass, so the text
    inside <script> or <style> never reaches the output.
    """

    def __init__(self, source, tags: Iterable[str] = NON_TEXT_TAGS) -> None:
        super().__init__(source)
        self.tags = frozenset(tags)

    def __iter__(self):
        depth = 0
        for token in super().__iter__():
            if token['type'] in ('StartTag', 'EndTag', 'EmptyTag') and token['name'] in self.tags:
                if token['type'] == 'StartTag':
                    depth += 1
                elif token['type'] == 'EndTag':
                    depth = max(depth - 1, 0)
                continue
            if depth:
                continue
            yield token


class NonTextCleaner(Cleaner):
    """
    bleach Cleaner that removes non-text tags with their content

    bleach's tokenizer turns every disallowed tag into text before the tree
    is built, so the non-text tags are admitted by the parser and then
    dropped by NonTextFilter ahead of the sanitizing pass. Non-text tags
    that are explicitly allowed are left alone.
    """

    def __init__(self, *args, non_text_tags: Iterable[str] = NON_TEXT_TAGS, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.non_text_tags = frozenset(non_text_tags) - frozenset(self.tags)
        self.parser = BleachHTMLParser(
            tags=frozenset(self.tags) | self.non_text_tags,
            strip=self.strip,
            consume_entities=False,
            namespaceHTMLElements=False,
        )
        tree_walker = self.walker
        self.walker = lambda dom: NonTextFilter(tree_walker(dom), tags=self.non_text_tags)


class ClassAllowFilter(Filter):
    """
    html5lib filter that prunes class tokens on selected tags

    Runs after bleach's sanitizing pass. For every start tag whose name is
    in `tags`, each whitespace-separated class is kept only if `allowed`
    accepts (tag, class). Survivors are joined with single spaces; the
    attribute is removed when nothing survives.
    """

    def __init__(
        self,
        source,
        tags: Iterable[str] = (),
        allowed: Callable[[str, str], bool] = lambda tag, cls: True,
    ) -> None:
        super().__init__(source)
        self.tags = frozenset(tags)
        self.allowed = allowed

    def __iter__(self):
        for token in super().__iter__():
            if token['type'] in ('StartTag', 'EmptyTag') and token['name'] in self.tags:
                self.classes_prune(token)
            yield token

    def classes_prune(self, token: dict) -> None:
        attrs = token.get('data') or {}
        key = (None, 'class')
        if key not in attrs:
            return
        kept = [cls for cls in attrs[key].split() if self.allowed(token['name'], cls)]
        if kept:
            attrs[key] = ' '.join(kept)
        else:
            del attrs[key]


def attributeMatcher_make(config: SanitizeConfig) -> Callable[[str, str, str], bool]:
    """
    Build a bleach attribute callable from a SanitizeConfig

    Attribute names ending in '*' (data-*, aria-*) match by prefix.
    """
    def attribute_allow(tag: str, name: str, value: str) -> bool:
        allowed = config.allowed_attributes.get(tag, ())
        if name in allowed:
            return True
        for pattern in allowed:
            if pattern.endswith('*') and name.startswith(pattern[:-1]):
                return True
        return False

    return attribute_allow


def sanitizeConfig_default() -> SanitizeConfig:
    """Create the unfrozen default config for the broad sanitizer"""
    return SanitizeConfig(
        allowed_tags=set(BASE_ALLOWED_TAGS) | set(EXTRA_ALLOWED_TAGS),
        allowed_attributes={tag: set(attrs) for tag, attrs in BASE_ALLOWED_ATTRIBUTES.items()},
        allowed_classes={},
        non_boolean_attributes=set(NON_BOOLEAN_ATTRIBUTES),
        allowed_schemes=list(appsettings.broad_schemes),
    )


class PostSanitizer:
    """
    Broad sanitizer for full post rendering

    Lifecycle:
        1. Construct (config open for registration)
        2. configure(hooks) once at startup: merge global attributes, let
           plugins adjust via "filter:sanitize.config", then freeze
        3. sanitize()/plaintext() for the rest of the process lifetime

    Calling sanitize() before configure() finalizes the config without
    running any registration hooks.
    """

    def __init__(self, config: Optional[SanitizeConfig] = None) -> None:
        self.config = config if config is not None else sanitizeConfig_default()
        self.configured = False
        self.cleaner: Optional[Cleaner] = None
        self.plaintext_cleaner = NonTextCleaner(tags=[], attributes={}, strip=True, strip_comments=True)

    async def configure(self, hooks: Optional["HookRegistry"] = None) -> SanitizeConfig:
        """
        Run the one-time registration phase and freeze the config

        Args:
            hooks: Registry whose "filter:sanitize.config" stages may extend
                   the config; each stage receives and returns it

        Returns:
            The frozen SanitizeConfig
        """
        if self.configured:
            return self.config

        self.config.global_attributes_merge()
        if hooks is not None:
            self.config = await hooks.fire('filter:sanitize.config', self.config)
        self.config_finalize()
        return self.config

    def config_finalize(self) -> None:
        """Freeze the config and build the bleach cleaner from it"""
        if not self.config.frozen:
            self.config.freeze()

        class_filters = []
        if self.config.allowed_classes:
            allowed_classes = self.config.allowed_classes
            class_filters.append(partial(
                ClassAllowFilter,
                tags=allowed_classes.keys(),
                allowed=lambda tag, cls: cls in allowed_classes[tag],
            ))

        self.cleaner = NonTextCleaner(
            tags=self.config.allowed_tags,
            attributes=attributeMatcher_make(self.config),
            protocols=self.config.allowed_schemes,
            strip=True,
            strip_comments=True,
            filters=class_filters,
            css_sanitizer=CSSSanitizer(),
        )
        self.configured = True
        LOG(f"Sanitizer ready: {len(self.config.allowed_tags)} tags allowed", level=2)

    def sanitize(self, content: Optional[str]) -> str:
        """
        Sanitize HTML against the broad allow-list

        Args:
            content: HTML to clean

        Returns:
            Safe HTML; disallowed tags unwrapped, disallowed attributes dropped
        """
        if not self.configured:
            LOG("Sanitizer used before configure(); finalizing without hooks", level=3)
            if not self.config.frozen:
                self.config.global_attributes_merge()
            self.config_finalize()
        return self.cleaner.clean(content or '')

    def plaintext(self, content: Optional[str]) -> str:
        """Strip every tag, leaving only (escaped) text"""
        return self.plaintext_cleaner.clean(content or '')


def narrowCleaner_make(
    schemes: Optional[Iterable[str]] = None,
    class_pattern: Pattern[str] = COLOR_CLASS_RE,
) -> Cleaner:
    """
    Build the narrow bleach cleaner

    Args:
        schemes: Link schemes to allow (defaults to settings.narrow_schemes)
        class_pattern: Pattern a <span> class must fully match to survive

    Returns:
        Configured Cleaner
    """
    return NonTextCleaner(
        tags=NARROW_ALLOWED_TAGS,
        attributes=NARROW_ALLOWED_ATTRIBUTES,
        protocols=list(schemes if schemes is not None else appsettings.narrow_schemes),
        strip=True,
        strip_comments=True,
        filters=[partial(
            ClassAllowFilter,
            tags=('span',),
            allowed=lambda tag, cls: bool(class_pattern.match(cls)),
        )],
    )


_narrow_cleaner: Optional[Cleaner] = None


def narrow_clean(content: Optional[str]) -> str:
    """
    Sanitize HTML against the narrow allow-list

    Inline style is always stripped. On <span>, classes other than
    text-color-<name> are removed; an empty class attribute is dropped.

    Example:
        >>> narrow_clean('<span class="text-color-green" style="color:#00ff00">X</span>')
        '<span class="text-color-green">X</span>'
    """
    global _narrow_cleaner
    if _narrow_cleaner is None:
        _narrow_cleaner = narrowCleaner_make()
    return _narrow_cleaner.clean(content or '')
