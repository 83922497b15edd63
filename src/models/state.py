"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional CLI pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI render pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as rendering progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, variant, highlightSource
        - env_check: sourceFiles, envOK
        - sources_read: sources
        - posts_render: renderResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing post source files
        outputdir: Directory for rendered HTML files
        verbosity: Logging verbosity level (1-3)
        inputFile: Glob pattern selecting source files inside inputdir
        variant: Content variant name to render
        highlightSource: Also write a syntax-highlighted view of each source
        envOK: Environment validation passed
        sourceFiles: Resolved source file paths
        sources: Mapping of post id (file stem) to raw source text
        renderResult: Render results (output_files, post_count, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="*.txt")
    variant: str = field(default="default")
    highlightSource: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    sourceFiles: List[Path] = field(default_factory=list)
    sources: Dict[str, str] = field(default_factory=dict)
    renderResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, variant, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Drop argparse extras that are not state fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_read,
            posts_render,
            results_report
        )

    This is equivalent to:
        results_report(posts_render(sources_read(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
