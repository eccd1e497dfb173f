"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
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
    Central state container for the deck pipelines (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Create pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, slides, structure, title,
          slug, templateFile, finalize
        - env_check: templateArchive, deckPath, envOK
        - structure_parse: layout
        - deck_materialize: deckPath (created on disk)
        - deck_customize: compileResult
        - results_report: (no additions, terminal stage)

    Finalize pipeline stages:
        - env_check: deckPath, envOK
        - deck_finalize: finalizeResult
        - finalize_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory that may hold a custom template archive
        outputdir: Directory that holds deck-<slug> project directories
        verbosity: Logging verbosity level (1-3)
        slides: Plain slide count (mutually exclusive with structure)
        structure: Comma-separated structure tokens
        title: Presentation title
        slug: Deck slug (generated when empty)
        templateFile: Optional template archive name relative to inputdir
        finalize: Run the finalization pipeline instead of creating a deck
        envOK: Environment validation passed
        templateArchive: Resolved template archive path
        deckPath: Project directory (outputdir / deck-<slug>)
        layout: Parsed LayoutDescriptor
        compileResult: Creation results (deck_path, slide_count, structure)
        finalizeResult: FinalizeReport from the finalization pipeline
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    slides: Optional[int] = field(default=None)
    structure: Optional[str] = field(default=None)
    title: str = field(default="Presentation")
    slug: Optional[str] = field(default=None)
    templateFile: Optional[str] = field(default=None)
    finalize: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    templateArchive: Path = field(default=Path("/"))
    deckPath: Path = field(default=Path("/"))
    layout: Optional[List[Any]] = field(default=None)  # LayoutDescriptor at runtime
    compileResult: Optional[Dict] = field(default=None)
    finalizeResult: Optional[Any] = field(default=None)  # FinalizeReport at runtime

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the pipeline.

        Args:
            options: Parsed CLI arguments (slides, structure, title, etc.)
            inputdir: Directory that may hold a template archive
            outputdir: Directory for generated decks

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Drop argparse entries that have no matching state field
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
            structure_parse,
            deck_materialize,
            deck_customize,
            results_report
        )

    This is equivalent to:
        results_report(deck_customize(deck_materialize(structure_parse(env_check(s)))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
