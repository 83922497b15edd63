#!/usr/bin/env python3
"""
chromamark - Inline color markup renderer

Renders forum post sources containing [color=...]...[/color] markup into
sanitized HTML, one output file per source file.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Each source file is treated as a stored post whose id is the file stem, so
the render cache and the full post pipeline (color markup, then
sanitization) apply exactly as they do for posts served by the forum.

Usage:
    chromamark inputdir/ outputdir/ --inputFile "*.txt"

Examples:
    # Render every .txt post source
    chromamark posts/ html/

    # Plaintext variant with highlighted source views, verbose
    chromamark posts/ html/ --variant plaintext --highlightSource -vv
"""

import asyncio
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter

from .lib import PostParser, RenderFailure, __version__, LOG, state_connectToLogger
from .lib.cache import cache_shutdown
from .lib.lexer import ColorMarkupLexer
from .models import ProgramState, PostData, ContentVariant, pipeline


DISPLAY_TITLE = r"""
   chromamark
   Inline color markup renderer
"""

# Define CLI arguments
parser = ArgumentParser(
    description="chromamark - render [color=...] post markup to sanitized HTML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", default="*.txt", type=str, help="Glob selecting post sources (relative to inputdir)"
)

parser.add_argument(
    "--variant",
    default="default",
    choices=[v.value for v in ContentVariant],
    help="Content variant to render",
)

parser.add_argument(
    "--highlightSource",
    action="store_true",
    default=False,
    help="Also write <stem>.source.html with the highlighted markup source",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve source files.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - sourceFiles: Sorted list of matching source paths
            - envOK: True if environment is valid

    Exits:
        1 if inputdir is missing or no source file matches
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.sourceFiles = sorted(p for p in state.inputdir.glob(state.inputFile) if p.is_file())
    if not state.sourceFiles:
        print(f"Error: No sources match {state.inputFile} in {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Found {len(state.sourceFiles)} source file(s)", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_read(inputstate: ProgramState) -> ProgramState:
    """
    Read every source file, keyed by post id (file stem).

    Exits:
        1 if a file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading sources...", level=1)
    sources = {}
    for path in state.sourceFiles:
        try:
            sources[path.stem] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading input file {path}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Read {len(sources[path.stem])} characters from {path.name}", level=2)

    state.sources = sources
    return state


async def posts_renderAll(state: ProgramState) -> dict:
    """Run the post pipeline over every source and write the results"""
    post_parser = PostParser()
    post_parser.hooks_register()
    await post_parser.configure()

    output_files = []
    for pid, source in state.sources.items():
        post = await post_parser.post_parse(PostData(pid=pid, source_content=source), state.variant)
        output_file = state.outputdir / f"{pid}.html"
        output_file.write_text(post.content, encoding="utf-8")
        output_files.append(str(output_file))
        LOG(f"Wrote {output_file}", level=2)

        if state.highlightSource:
            source_file = state.outputdir / f"{pid}.source.html"
            formatter = HtmlFormatter(full=True, title=pid)
            source_file.write_text(highlight(source, ColorMarkupLexer(), formatter), encoding="utf-8")
            LOG(f"Wrote {source_file}", level=2)

    return {
        'status': True,
        'output_files': output_files,
        'post_count': len(output_files),
    }


def posts_render(inputstate: ProgramState) -> ProgramState:
    """
    Render every source through the post pipeline.

    Returns:
        ProgramState with added field:
            - renderResult: Dict containing status, output_files, post_count

    Exits:
        1 if no sources were read or a pipeline stage fails
    """
    state = inputstate.copy()

    LOG("Rendering posts...", level=1)

    if not state.sources:
        print("Error: No sources available", file=sys.stderr)
        sys.exit(1)

    try:
        state.renderResult = asyncio.run(posts_renderAll(state))
        LOG(f"Render complete: {state.renderResult['post_count']} posts", level=2)
    except (RenderFailure, OSError) as e:
        print(f"Render error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)
    finally:
        cache_shutdown()

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display render results to the user.

    Exits:
        1 if renderResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.renderResult:
        print("Error: Render failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Render successful!", level=1)
        LOG(f"  Posts: {state.renderResult['post_count']}", level=1)
        LOG(f"  Output: {state.outputdir}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="chromamark - Inline color markup renderer",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render post sources to sanitized HTML.

    Orchestrates the pipeline:
        1. env_check: Validate paths and collect sources
        2. sources_read: Read every source file
        3. posts_render: Run the post pipeline and write HTML
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_read, posts_render, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
