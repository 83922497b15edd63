"""
Post parsing tests - the full render pipeline with caching

Validates that:
- filter:parse.post renders color markup, then sanitizes
- Rendered posts are memoized per (pid, variant) until purged
- Drafts without a pid are never cached
- raw, about-me and signature pipelines apply their own stages
"""

import asyncio

import pytest

from chromamark.config import AppSettings
from chromamark.lib.cache import RenderCache
from chromamark.lib.hooks import RenderFailure
from chromamark.lib.posts import PostParser, htmlTags_strip, translation_escape
from chromamark.models.content import ContentVariant, HookSpec, PostData


class Counter:
    """Pipeline stage that counts how often the pipeline runs"""

    def __init__(self):
        self.calls = 0

    def __call__(self, payload):
        self.calls += 1
        return payload


@pytest.fixture
def cache():
    return RenderCache()


@pytest.fixture
def counter():
    return Counter()


@pytest.fixture
def post_parser(cache, counter):
    parser = PostParser(cache=cache)
    parser.hooks_register()
    parser.hooks.register(HookSpec(hook="filter:parse.post", method=counter, priority=1, owner="test"))
    asyncio.run(parser.configure())
    return parser


def parse(post_parser, post, variant=None):
    return asyncio.run(post_parser.post_parse(post, variant))


class TestPostPipeline:
    """Color markup followed by sanitization"""

    def test_color_markup_rendered_and_sanitized(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="[color=red]hi[/color]"))

        assert post.content == \
            '<span class="nbb-text-color" data-color="red" style="color: #d92b2b;">hi</span>'

    def test_inner_text_is_escaped(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="[color=red]a < b[/color]"))
        assert ">a &lt; b</span>" in post.content

    def test_invalid_token_unwrapped(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="[color=nope]hi[/color]"))
        assert post.content == "hi"

    def test_unsafe_html_removed(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content='[color=blue]<b onclick="x()">b</b>[/color]'))
        assert "onclick" not in post.content
        assert "<b>b</b>" in post.content

    def test_plaintext_variant_strips_tags(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="[color=red]<b>hi</b>[/color]"), "plaintext")
        assert post.content == "hi"

    def test_source_content_preferred(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="stale", source_content="[color=red]x[/color]"))
        assert "stale" not in post.content
        assert "nbb-text-color" in post.content

    def test_translation_markers_escaped(self, post_parser):
        post = parse(post_parser, PostData(pid="1", content="[[global:home]]"))
        assert post.content == "&lsqb;&lsqb;global:home&rsqb;&rsqb;"

    def test_none_post(self, post_parser):
        assert parse(post_parser, None) is None


class TestPostCaching:
    """Memoization per (pid, variant)"""

    def test_second_render_hits_cache(self, post_parser, counter):
        first = parse(post_parser, PostData(pid="9", content="[color=red]x[/color]"))
        second = parse(post_parser, PostData(pid="9", content="[color=red]x[/color]"))

        assert counter.calls == 1
        assert second.content == first.content

    def test_purge_forces_rerender(self, post_parser, counter, cache):
        parse(post_parser, PostData(pid="9", content="[color=red]x[/color]"))
        parse(post_parser, PostData(pid="9", content="[color=red]x[/color]"), "plaintext")
        post_parser.cachedPost_clear("9")

        assert cache.get("9", "default") is None
        assert cache.get("9", "plaintext") is None

        edited = parse(post_parser, PostData(pid="9", content="[color=blue]y[/color]"))
        assert counter.calls == 3
        assert 'data-color="blue"' in edited.content

    def test_variants_cached_separately(self, post_parser, counter):
        parse(post_parser, PostData(pid="9", content="x"), "default")
        parse(post_parser, PostData(pid="9", content="x"), "markdown")
        assert counter.calls == 2

    def test_unknown_variant_is_default(self, post_parser, cache):
        parse(post_parser, PostData(pid="9", content="x"), "bogus")
        assert cache.get("9", ContentVariant.DEFAULT) == "x"

    def test_drafts_not_cached(self, post_parser, counter, cache):
        parse(post_parser, PostData(pid=None, content="draft"))
        parse(post_parser, PostData(pid="", content="draft"))
        parse(post_parser, PostData(pid=0, content="draft"))
        parse(post_parser, PostData(pid=0, content="draft"))

        assert counter.calls == 4
        assert len(cache) == 0

    def test_cache_disabled(self, counter):
        settings = AppSettings(cache_enabled=False)
        parser = PostParser(settings=settings)
        parser.hooks_register()
        parser.hooks.register(HookSpec(hook="filter:parse.post", method=counter, priority=1))

        parse(parser, PostData(pid="1", content="x"))
        parse(parser, PostData(pid="1", content="x"))

        assert parser.cache is None
        assert counter.calls == 2


class TestStageFailure:
    """External stage failures surface as RenderFailure"""

    def test_failure_propagates_and_is_not_cached(self, post_parser, cache):
        def remote_transform(payload):
            raise ConnectionError("translation service down")

        post_parser.hooks.register(HookSpec(hook="filter:parse.post", method=remote_transform, owner="plugin"))

        with pytest.raises(RenderFailure) as excinfo:
            parse(post_parser, PostData(pid="5", content="x"))

        assert isinstance(excinfo.value.__cause__, ConnectionError)
        assert cache.get("5", "default") is None


class TestOtherPipelines:
    """Raw content, about-me text and signatures"""

    def test_raw_content(self, post_parser):
        result = asyncio.run(post_parser.raw_parse("[color=teal]x[/color]<script>alert(1)</script>"))
        assert result == \
            '<span class="nbb-text-color" data-color="teal" style="color: #1aa39a;">x</span>'

    def test_non_text_tags_dropped_with_content(self, post_parser):
        post = parse(post_parser, PostData(
            pid="3", content="hi<script>alert(1)</script><style>body{display:none}</style>"
        ))
        assert post.content == "hi"

    def test_plaintext_variant_drops_script_content(self, post_parser):
        post = parse(post_parser, PostData(pid="3", content="x<script>alert(1)</script>"), "plaintext")
        assert post.content == "x"

    def test_about_me_sanitized_only(self, post_parser):
        result = asyncio.run(post_parser.aboutMe_parse('[color=red]x[/color]<i onclick="y">i</i>'))
        assert result == "[color=red]x[/color]<i>i</i>"

    def test_signature_sanitized(self, post_parser):
        result = asyncio.run(post_parser.signature_parse('<a href="https://example.org">site</a>'))
        assert result == '<a href="https://example.org">site</a>'

    def test_signature_links_and_images_disabled(self, cache):
        settings = AppSettings(signatures_disable_links=True, signatures_disable_images=True)
        parser = PostParser(cache=cache, settings=settings)
        parser.hooks_register()

        result = asyncio.run(parser.signature_parse(
            '<a href="https://example.org">site</a> <img src="https://example.org/x.png"> [[x]]'
        ))

        assert result.startswith("site  ")
        assert "<a" not in result
        assert "<img" not in result
        assert "[[" not in result


class TestHelpers:
    """Module-level helpers"""

    def test_translation_escape(self):
        assert translation_escape("a [[b]] c") == "a &lsqb;&lsqb;b&rsqb;&rsqb; c"

    def test_html_tags_strip(self):
        assert htmlTags_strip('<a href="/x">link</a> <abbr>A</abbr>', ['a']) == 'link <abbr>A</abbr>'
        assert htmlTags_strip('<IMG src="x"/>text', ['img']) == 'text'
        assert htmlTags_strip('<b>x</b>', []) == '<b>x</b>'
