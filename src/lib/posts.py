"""
Post parsing facade

Wires the color-markup renderer, the sanitizers and the render cache into
the hook pipelines used for posts, raw content, "about me" text and
signatures.

Core stages registered by PostParser.hooks_register():

    filter:parse.post      priority 6   color markup
                           priority 10  sanitize (plaintext variant strips all tags)
    filter:parse.raw       priority 6   color markup
                           priority 10  sanitize
    filter:parse.aboutme   priority 10  sanitize
    filter:parse.signature priority 10  sanitize

Usage:
    parser = PostParser()
    parser.hooks_register()
    await parser.configure()
    post = await parser.post_parse(PostData(pid="7", content="[color=red]hi[/color]"))
"""

import re
from typing import Any, Optional

from ..config import appsettings, AppSettings
from ..models.content import ContentVariant, PostData, RenderPayload, HookSpec
from .cache import RenderCache, cache_getOrCreate
from .hooks import HookRegistry
from .renderer import MarkupRenderer
from .sanitizer import PostSanitizer
from .log import LOG


COLOR_MARKUP_PRIORITY = 6


def translation_escape(text: str) -> str:
    """Neutralize [[namespace:key]] translation markers in rendered text"""
    return text.replace('[[', '&lsqb;&lsqb;').replace(']]', '&rsqb;&rsqb;')


def htmlTags_strip(text: str, tags) -> str:
    """
    Remove the given tags (opening and closing) while keeping their content

    Example:
        >>> htmlTags_strip('<a href="/x">link</a> <b>b</b>', ['a'])
        'link <b>b</b>'
    """
    if not tags:
        return text
    pattern = re.compile(
        r'<(/)?(' + '|'.join(re.escape(t) for t in tags) + r')(?=[\s>/])[^>]*>',
        re.IGNORECASE,
    )
    return pattern.sub('', text)


def contentId_isStable(content_id: Any) -> bool:
    """Drafts and previews carry no (or a falsy) id and are never cached"""
    return bool(content_id)


class PostParser:
    """
    Render facade for posts and other user-authored text

    All collaborators are injectable; by default the process-wide render
    cache and a fresh hook registry are used.
    """

    def __init__(
        self,
        hooks: Optional[HookRegistry] = None,
        cache: Optional[RenderCache] = None,
        renderer: Optional[MarkupRenderer] = None,
        sanitizer: Optional[PostSanitizer] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.settings = settings or appsettings
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.renderer = renderer or MarkupRenderer()
        self.sanitizer = sanitizer or PostSanitizer()
        if cache is None and self.settings.cache_enabled:
            cache = cache_getOrCreate()
        self.cache = cache

    def hooks_register(self) -> None:
        """Register the core render and sanitize stages"""
        self.hooks.register(HookSpec(
            hook='filter:parse.post',
            method=self.postColors_stage,
            priority=COLOR_MARKUP_PRIORITY,
        ))
        self.hooks.register(HookSpec(
            hook='filter:parse.raw',
            method=self.renderer.render,
            priority=COLOR_MARKUP_PRIORITY,
        ))
        self.hooks.register(HookSpec(hook='filter:parse.post', method=self.postSanitize_stage))
        self.hooks.register(HookSpec(hook='filter:parse.raw', method=self.sanitize))
        self.hooks.register(HookSpec(hook='filter:parse.aboutme', method=self.sanitize))
        self.hooks.register(HookSpec(hook='filter:parse.signature', method=self.sanitize))

    async def configure(self) -> None:
        """Finish sanitizer registration; call once before the first render"""
        await self.sanitizer.configure(self.hooks)

    def postColors_stage(self, payload: RenderPayload) -> RenderPayload:
        payload.content = self.renderer.render(payload.content)
        return payload

    def postSanitize_stage(self, payload: RenderPayload) -> RenderPayload:
        if payload.variant is ContentVariant.PLAINTEXT:
            payload.content = self.sanitizer.plaintext(payload.content)
        else:
            payload.content = self.sanitizer.sanitize(payload.content)
        return payload

    def sanitize(self, content: Optional[str]) -> str:
        return self.sanitizer.sanitize(content)

    def plaintext_sanitize(self, content: Optional[str]) -> str:
        return self.sanitizer.plaintext(content)

    async def post_parse(
        self, post: Optional[PostData], variant: Any = None
    ) -> Optional[PostData]:
        """
        Render a post's content, using the cache for posts with a pid

        Args:
            post: Post to render; its content is replaced in place
            variant: Variant name or member; unknown values mean DEFAULT

        Returns:
            The same PostData with rendered content, or None for None

        Raises:
            RenderFailure: A pipeline stage failed
        """
        if post is None:
            return post

        variant = ContentVariant.coerce(variant)
        post.content = str(post.source_content or post.content or '')

        cacheable = self.cache is not None and contentId_isStable(post.pid)
        if cacheable:
            cached = self.cache.get(post.pid, variant)
            if cached is not None:
                LOG(f"Cache hit for post {post.pid} ({variant.value})", level=3)
                post.content = cached
                return post

        payload = await self.hooks.fire(
            'filter:parse.post',
            RenderPayload(content=post.content, variant=variant, post=post),
        )
        post.content = translation_escape(payload.content)

        if cacheable:
            self.cache.set(post.pid, variant, post.content)
        return post

    def cachedPost_clear(self, pid: Any) -> None:
        """Drop every cached variant of a post; call whenever its content changes"""
        if self.cache is not None:
            self.cache.purge(pid)

    async def raw_parse(self, content: Optional[str]) -> str:
        """Render content that has no persisted identity (previews, drafts)"""
        return await self.hooks.fire('filter:parse.raw', content or '')

    async def aboutMe_parse(self, content: Optional[str]) -> str:
        """Render profile "about me" text"""
        return await self.hooks.fire('filter:parse.aboutme', content or '')

    async def signature_parse(self, signature: Optional[str]) -> str:
        """
        Render a user signature

        Links and images are stripped (keeping their text) when disabled in
        settings, before the signature pipeline runs.
        """
        signature = translation_escape(signature or '')

        tags_toStrip = []
        if self.settings.signatures_disable_links:
            tags_toStrip.append('a')
        if self.settings.signatures_disable_images:
            tags_toStrip.append('img')

        signature = htmlTags_strip(signature, tags_toStrip)
        return await self.hooks.fire('filter:parse.signature', signature)
