#!/usr/bin/env python3
"""
snipmark - Snippet markup processor

Converts source-code snippets annotated with trailing markup comments
(@start, @end, @highlight, @replace, @link) into HTML fragments.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Markup:
    - @start region=R / @end region=R: delimit named regions
    - @highlight [substring=S] [regex=X] [type=bold|italic|highlighted]
    - @replace [substring=S] [regex=X] replacement=T
    - @link [substring=S] [regex=X] target=NAME
    - region-scoped markup applies to every line until the matching @end
    - a markup comment ending in ':' applies to the next line

Usage:
    snipmark inputdir/ outputdir/ --inputFile Example.java

    The converted fragment will be written to outputdir/ as
    <inputFile stem>.html unless --outputFile is given.

Examples:
    # Whole file
    snipmark snippets/ output/ --inputFile Example.java

    # One region, with @link targets resolved from a YAML map
    snipmark snippets/ output/ --inputFile Example.java --region main --targets targets.yaml

    # Verbose output with a highlighted preview of the source
    snipmark snippets/ output/ --inputFile Example.java -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from . import __version__
from .config import appsettings
from .lib import (
    LOG,
    Diagnostics,
    MappingReferenceResolver,
    ReferenceStore,
    SnippetConverter,
    SourceResolver,
    TargetsFileError,
    state_connectToLogger,
)
from .lib.lexer import source_preview
from .models import ProgramState, SnippetAttributes, pipeline


DISPLAY_TITLE = r"""
             _                            _
   ___ _ __ (_)_ __  _ __ ___   __ _ _ __| | __
  / __| '_ \| | '_ \| '_ ` _ \ / _` | '__| |/ /
  \__ \ | | | | |_) | | | | | | (_| | |  |   <
  |___/_| |_|_| .__/|_| |_| |_|\__,_|_|  |_|\_\
              |_|
  Snippet markup processor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="snipmark - Convert snippets with markup comments to HTML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Snippet source file (relative to inputdir)"
)

parser.add_argument(
    "--region",
    default=None,
    type=str,
    help="Region of the snippet file to extract (between @start and @end)",
)

parser.add_argument(
    "--targets",
    default=None,
    type=str,
    help="YAML file mapping @link targets to references (relative to inputdir)",
)

parser.add_argument(
    "--snippetId", default=None, type=str, help="id attribute of the generated container"
)

parser.add_argument(
    "--lang", default=None, type=str, help="Language of the snippet, rendered as language-<lang>"
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Name of the generated file. Defaults to <inputFile stem>.html",
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
    Validate environment and resolve all file paths.

    Verifies that the snippet file and the optional targets file exist,
    then creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the snippet file
            - targetsFile: Resolved path to the targets file, or None
            - htmlOutputFile: Path of the file to write
            - envOK: True if environment is valid

    Exits:
        1 if the snippet file or the targets file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.targets:
        targets_file = state.inputdir / state.targets
        if not targets_file.is_file():
            print(f"Error: Targets file not found: {targets_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.targetsFile = targets_file
        LOG(f"Targets file: {targets_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    output_name = state.outputFile or f"{Path(state.inputFile).stem}.html"
    state.htmlOutputFile = state.outputdir / output_name
    LOG(f"Output file: {state.htmlOutputFile}", level=2)

    state.envOK = True
    return state


def source_resolve(inputstate: ProgramState) -> ProgramState:
    """
    Resolve the snippet file into source lines.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added field:
            - snippetSource: SnippetSource with the file's lines and region

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading snippet file...", level=1)

    resolver = SourceResolver([state.inputdir])
    attributes = SnippetAttributes(file=state.inputFile, region=state.region)
    state.snippetSource = resolver.source_resolve(attributes)
    if state.snippetSource is None:
        print(f"Error reading snippet file: {state.inputSourceFile}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.snippetSource.lines)} lines from {state.inputSourceFile.name}", level=2)
    if state.verbosity >= 3:
        LOG("Source preview:\n" + source_preview(state.snippetSource.lines), level=3)
    return state


def snippet_convert(inputstate: ProgramState) -> ProgramState:
    """
    Convert the resolved snippet to an HTML fragment.

    Args:
        inputstate: Program state with snippetSource

    Returns:
        ProgramState with added fields:
            - convertedHtml: The container element with the processed snippet
            - warnings, errors: Diagnostics recorded during conversion

    Exits:
        1 if the targets file cannot be loaded
    """

    state = inputstate.copy()

    LOG("Processing snippet markup...", level=1)

    references = None
    if state.targetsFile is not None:
        try:
            references = MappingReferenceResolver.file_load(state.targetsFile)
        except TargetsFileError as e:
            print(f"Targets error: {e}", file=sys.stderr)
            sys.exit(1)

    diagnostics = Diagnostics()
    converter = SnippetConverter(
        references=references,
        store=ReferenceStore(),
        diagnostics=diagnostics,
    )
    attributes = SnippetAttributes(
        file=state.inputFile, region=state.region, id=state.snippetId, lang=state.lang
    )
    body = converter.source_parse(state.snippetSource)
    state.convertedHtml = converter.container_render(body, attributes)
    state.warnings = list(diagnostics.warnings)
    state.errors = list(diagnostics.errors)
    LOG(f"Conversion complete: {len(state.warnings)} warnings, {len(state.errors)} errors", level=2)
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the converted fragment to the output file.

    Args:
        inputstate: Program state with convertedHtml and htmlOutputFile

    Returns:
        ProgramState with added field:
            - written: True once the file is written

    Exits:
        1 if there is nothing to write or the write fails
    """

    state = inputstate.copy()

    if state.convertedHtml is None:
        print("Error: No converted snippet available", file=sys.stderr)
        sys.exit(1)

    try:
        state.htmlOutputFile.write_text(state.convertedHtml + "\n", encoding="utf-8")
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Wrote {state.htmlOutputFile}", level=2)
    state.written = True
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display conversion results to user.

    Args:
        inputstate: Program state after results_write

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if nothing was written, or in strict mode if any diagnostic
        was recorded
    """
    state: ProgramState = inputstate.copy()
    if not state.written:
        print("Error: Conversion failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Conversion successful!", level=1)
        LOG(f"  Output: {state.htmlOutputFile}", level=1)
        LOG(f"  Warnings: {len(state.warnings)}", level=1)
        LOG(f"  Errors: {len(state.errors)}", level=1)

    if appsettings.strict_mode and (state.warnings or state.errors):
        print("Error: diagnostics recorded in strict mode", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="snipmark - Snippet markup processor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert a snippet file with markup comments to HTML.

    Orchestrates the full conversion pipeline:
        1. env_check: Validate paths and environment
        2. source_resolve: Read the snippet file
        3. snippet_convert: Process markup and wrap in the container
        4. results_write: Write the HTML fragment
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing snippet files
        outputdir: Directory where the fragment will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_resolve, snippet_convert, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
