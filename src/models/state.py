"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .snippet import SnippetSource


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the conversion progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, region, targets,
                   snippetId, lang, outputFile
        - env_check: inputSourceFile, targetsFile, htmlOutputFile, envOK
        - source_resolve: snippetSource
        - snippet_convert: convertedHtml, warnings, errors
        - results_write: written
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory searched for snippet files
        outputdir: Directory where the HTML fragment is written
        verbosity: Logging verbosity level (1-3)
        inputFile: Snippet file name (relative to inputdir)
        region: Optional region to extract from the snippet file
        targets: Optional YAML file mapping @link targets to references
        snippetId: Optional id rendered on the container element
        lang: Optional language rendered as a language-* class
        outputFile: Output file name (defaults to <inputFile stem>.html)
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the snippet file
        targetsFile: Resolved path to the targets file, if any
        htmlOutputFile: Resolved path of the output file
        snippetSource: Resolved snippet lines
        convertedHtml: Converted snippet fragment
        warnings: Warnings recorded during conversion
        errors: Errors recorded during conversion
        written: Output file was written
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    region: Optional[str] = field(default=None)
    targets: Optional[str] = field(default=None)
    snippetId: Optional[str] = field(default=None)
    lang: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    targetsFile: Optional[Path] = field(default=None)
    htmlOutputFile: Path = field(default=Path("/"))
    snippetSource: Optional[Any] = field(default=None)  # SnippetSource at runtime
    convertedHtml: Optional[str] = field(default=None)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    written: bool = field(default=False)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the conversion pipeline.

        Args:
            options: Parsed CLI arguments (inputFile, region, etc.)
            inputdir: Directory containing snippet files
            outputdir: Directory for conversion output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that are ProgramState fields
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

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_resolve,
            snippet_convert,
            results_write,
            results_report
        )

    This is equivalent to:
        results_report(results_write(snippet_convert(source_resolve(env_check(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
