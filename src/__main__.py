#!/usr/bin/env python3
"""
decksmith - reveal.js deck scaffolding and finalization

Creates a self-contained slide-deck project by extracting a packaged
template and filling it with placeholder slides laid out by a compact
structure string. A separate finalize pass consolidates loose stylesheets
into the deck's canonical stylesheet and strips build artifacts before
distribution.

As with other ChRIS "ds" plugins, the app takes an input directory and an
output directory.

Structure grammar:
    --structure is a comma-separated list of tokens
        1   single horizontal slide (the first one is the title slide)
        n   vertical stack of n slides (n > 1)
        d   section divider slide

Usage:
    decksmith inputdir/ outputdir/ --structure 1,1,d,3,1 --title "Q4 Review"

    The deck is written to outputdir/deck-<slug>/ as index.html plus the
    template's lib/ asset library.

Examples:
    # Ten single slides, random slug
    decksmith in/ decks/ --slides 10

    # Mixed layout with a custom slug
    decksmith in/ decks/ --structure 1,1,1,d,3,d,1,1 --title "My Deck" --slug mydeck

    # Use in/custom.zip instead of the packaged template
    decksmith in/ decks/ --templateFile custom.zip

    # Finalize an existing deck before distribution
    decksmith in/ decks/ --finalize --slug mydeck
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    structure_parse,
    TemplateMaterializer,
    DeckCustomizer,
    FinalizationPipeline,
    slug_generate,
    DeckError,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline, layout_describe


DISPLAY_TITLE = r"""
     _           _                  _ _   _
  __| | ___  ___| | _____ _ __ ___ (_) |_| |__
 / _` |/ _ \/ __| |/ / __| '_ ` _ \| | __| '_ \
| (_| |  __/ (__|   <\__ \ | | | | | | |_| | | |
 \__,_|\___|\___|_|\_\___/_| |_| |_|_|\__|_| |_|

  reveal.js deck scaffolding
"""

# Define CLI arguments
parser = ArgumentParser(
    description="decksmith - create and finalize reveal.js deck projects",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--slides",
    default=None,
    type=int,
    help="Number of horizontal slides (simple mode). Cannot be used with --structure",
)

parser.add_argument(
    "--structure",
    default=None,
    type=str,
    help="Mixed layout, comma-separated: 1=single slide, n>1=vertical stack, d=section divider",
)

parser.add_argument("--title", default="Presentation", type=str, help="Presentation title")

parser.add_argument(
    "--slug",
    default=None,
    type=str,
    help="Custom slug for the deck folder (default: random hex)",
)

parser.add_argument(
    "--templateFile",
    default=None,
    type=str,
    help="Template archive (relative to inputdir). Defaults to the packaged template",
)

parser.add_argument(
    "--finalize",
    default=False,
    action="store_true",
    help="Finalize outputdir/deck-<slug> instead of creating a deck (requires --slug)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def error_exit(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all paths.

    In create mode, resolves the template archive (inputdir/templateFile or
    the packaged template) and the slug. In finalize mode, requires a slug
    and resolves the deck directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - templateArchive: Resolved template archive (create mode)
            - slug: Given or generated slug
            - deckPath: outputdir / deck-<slug>
            - envOK: True if environment is valid

    Exits:
        1 if the template archive is missing, or --finalize lacks --slug
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.finalize:
        if not state.slug:
            state.envOK = False
            error_exit("--finalize requires --slug to locate the deck")
    else:
        if state.templateFile:
            state.templateArchive = state.inputdir / state.templateFile
        else:
            state.templateArchive = appsettings.template_archive

        if not state.templateArchive.is_file():
            state.envOK = False
            error_exit(f"Template zip not found at {state.templateArchive}")

        LOG(f"Template archive: {state.templateArchive}", level=2)

        if not state.slug:
            state.slug = slug_generate()

    state.deckPath = state.outputdir / appsettings.deckDirname_make(state.slug)
    LOG(f"Deck directory: {state.deckPath}", level=2)

    state.envOK = True
    return state


def structure_parse_stage(inputstate: ProgramState) -> ProgramState:
    """
    Parse --slides / --structure into a LayoutDescriptor.

    Returns:
        ProgramState with added field:
            - layout: List of slide groups

    Exits:
        1 on an invalid token or when both forms are given
    """

    state = inputstate.copy()

    try:
        state.layout = structure_parse(slides=state.slides, structure=state.structure)
    except DeckError as e:
        error_exit(str(e))

    LOG(f"Structure: {layout_describe(state.layout)}", level=2)
    return state


def deck_materialize(inputstate: ProgramState) -> ProgramState:
    """
    Extract the template archive into the deck directory.

    Exits:
        1 if the deck directory already exists or extraction fails
    """

    state = inputstate.copy()

    try:
        materializer = TemplateMaterializer(template_archive=state.templateArchive)
        state.deckPath = materializer.materialize(state.slug, state.outputdir)
    except (DeckError, OSError) as e:
        error_exit(str(e))

    return state


def deck_customize(inputstate: ProgramState) -> ProgramState:
    """
    Replace the template's slides, title and embedded config.

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing:
                - deck_path: str
                - index_file: str
                - slide_count: int
                - structure: str

    Exits:
        1 on I/O failure or a template without a slide container
    """

    state = inputstate.copy()

    try:
        customizer = DeckCustomizer()
        deck = customizer.customize(state.deckPath, state.title, state.slug, state.layout)
    except (DeckError, OSError) as e:
        error_exit(str(e))

    state.compileResult = {
        "deck_path": str(state.deckPath),
        "index_file": str(state.deckPath / appsettings.markup_entry),
        "slide_count": deck.slide_count,
        "structure": layout_describe(state.layout),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display creation results and viewing instructions.

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        error_exit("Deck creation failed")

    LOG(f"\n✓ Presentation created: {state.compileResult['deck_path']}", level=1)
    LOG(
        f"  - {state.compileResult['slide_count']} slides "
        f"(structure: {state.compileResult['structure']})",
        level=1,
    )
    LOG(f"  - Open {state.compileResult['index_file']} in a browser to view", level=1)
    return state


def deck_finalize(inputstate: ProgramState) -> ProgramState:
    """
    Run the finalization pipeline against the deck directory.

    Returns:
        ProgramState with added field:
            - finalizeResult: FinalizeReport

    Exits:
        1 if the deck directory or its markup entry is missing
    """

    state = inputstate.copy()

    try:
        state.finalizeResult = FinalizationPipeline(state.deckPath).run()
    except DeckError as e:
        error_exit(str(e))

    return state


def finalize_report(inputstate: ProgramState) -> ProgramState:
    """Display the per-step finalization outcome and next steps."""
    state: ProgramState = inputstate.copy()
    report = state.finalizeResult

    for outcome in report.outcomes:
        mark = "✓" if outcome.ok else "⚠"
        summary = outcome.messages[-1] if outcome.messages else ""
        LOG(f"{mark} {outcome.step}: {summary}", level=1)

    if report.ok:
        LOG("\n✓ Presentation finalized successfully!", level=1)
    else:
        LOG("\n⚠ Presentation finalized with warnings", level=1)
    LOG("\nNext steps:", level=1)
    LOG(f"  - Add images/docs to {state.deckPath / appsettings.assets_dirname}/", level=1)
    LOG(f"  - Open {state.deckPath / appsettings.markup_entry} in a browser to view", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="decksmith - reveal.js deck scaffolding",
    category="Visualization",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - create or finalize a deck project.

    Create pipeline:
        1. env_check: Resolve template archive, slug and deck path
        2. structure_parse_stage: Parse --slides / --structure
        3. deck_materialize: Extract template into outputdir/deck-<slug>
        4. deck_customize: Write slides, title and embedded config
        5. results_report: Display results

    Finalize pipeline (--finalize):
        1. env_check: Resolve deck path from --slug
        2. deck_finalize: Merge stylesheets, strip links, remove artifacts
        3. finalize_report: Display per-step results

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    if state.finalize:
        pipeline(state, env_check, deck_finalize, finalize_report)
    else:
        pipeline(
            state,
            env_check,
            structure_parse_stage,
            deck_materialize,
            deck_customize,
            results_report,
        )


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
