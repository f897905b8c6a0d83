#!/usr/bin/env python3
"""
tsdeclare - Ambient declaration generator

Reads every selected source file in an input directory, strips
implementation bodies and writes the exported surface as a declaration
file at the mirrored path in the output directory.

As with other ChRIS plugins, the input and output directories are
positional arguments and all behaviour is selected with options.

Usage:
    tsdeclare inputdir/ outputdir/ [--pattern 'src/**/*.ts']

    src/index.ts → outputdir/src/index.d.ts

Examples:
    # Every .ts file under the input directory
    tsdeclare . types/

    # Only the public entry points, into a subdirectory, removing stale output
    tsdeclare . dist/ --pattern 'src/index.ts' --outputSubdir types/ --clean

    # Verbose output
    tsdeclare . types/ -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import extract, ExtractionError, __version__, LOG, ERROR, state_connectToLogger
from .lib.project import ProjectConfig, ProjectConfigError
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _            _           _
 | |_ ___  __| | ___  ___| | __ _ _ __ ___
 | __/ __|/ _` |/ _ \/ __| |/ _` | '__/ _ \
 | |_\__ \ (_| |  __/ (__| | (_| | | |  __/
  \__|___/\__,_|\___|\___|_|\__,_|_|  \___|

  Ambient declaration generator
"""

# Define CLI arguments
parser = ArgumentParser(
    description="tsdeclare - generate ambient declaration files from sources",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=None,
    type=str,
    help="Glob selecting source files (relative to inputdir). Overrides configured entrypoints",
)

parser.add_argument(
    "--configFile",
    default=appsettings.config_filename,
    type=str,
    help="Project configuration file (relative to inputdir). Optional",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the generated declarations",
)

parser.add_argument(
    "--clean",
    action="store_true",
    help="Remove previously generated declaration files from the output directory first",
)

parser.add_argument(
    "--noComments",
    action="store_true",
    help="Do not copy documentation comments into the declarations",
)

parser.add_argument(
    "--singleLine",
    action="store_true",
    help="Only merge constants across lines; other declarations are read from their first line",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve configuration.

    Loads the optional project configuration, resolves the comment and
    multi-line options (CLI > project file > settings), creates the output
    directory and, when requested, removes stale declaration files there.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - projectConfig: Loaded ProjectConfig
            - keepComments: Resolved comment option
            - multilineDeclarations: Resolved accumulation option
            - dtsOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input directory is missing or the configuration is invalid
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    try:
        state.projectConfig = ProjectConfig(state.inputdir / state.configFile)
    except ProjectConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    LOG(f"Project config: {state.projectConfig.config_path} ({len(state.projectConfig.config)} keys)", level=2)

    state.keepComments = state.projectConfig.keepComments_get() and not state.noComments
    state.multilineDeclarations = (
        state.projectConfig.multilineDeclarations_get() and not state.singleLine
    )

    state.dtsOutputdir = state.outputdir / state.outputSubdir
    state.dtsOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.dtsOutputdir}", level=2)

    if state.clean or state.projectConfig.clean_get():
        stale = sorted(state.dtsOutputdir.rglob(f"*{appsettings.output_suffix}"))
        for path in stale:
            path.unlink()
        LOG(f"Removed {len(stale)} previously generated files", level=2)

    state.envOK = True
    return state


def sources_discover(inputstate: ProgramState) -> ProgramState:
    """
    Select the source files to process.

    Args:
        inputstate: Program state with projectConfig set

    Returns:
        ProgramState with added field:
            - sourceFiles: Sorted list of source paths

    Exits:
        1 if no source file matches
    """

    state = inputstate.copy()

    patterns = [state.pattern] if state.pattern else state.projectConfig.entrypoints_get()
    LOG(f"Discovering sources matching {', '.join(patterns)}", level=1)

    state.sourceFiles = state.projectConfig.sources_discover(state.inputdir, patterns)
    if not state.sourceFiles:
        print(f"Error: No source files match {', '.join(patterns)} in {state.inputdir}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Found {len(state.sourceFiles)} source files", level=2)
    return state


def declarations_generate(inputstate: ProgramState) -> ProgramState:
    """
    Generate a declaration file for every source file.

    Each file is processed independently; a file that cannot be read is
    recorded as failed and the remaining files are still generated.

    Args:
        inputstate: Program state with sourceFiles

    Returns:
        ProgramState with added field:
            - generateResult: Dict containing:
                - status: bool (every file generated)
                - written: List[str] (generated declaration paths)
                - failed: List[str] (sources that could not be read)
    """

    state = inputstate.copy()

    LOG("Generating declarations...", level=1)

    written = []
    failed = []
    for source_file in state.sourceFiles:
        try:
            declarations = extract(
                source_file,
                multiline_declarations=state.multilineDeclarations,
                keep_comments=state.keepComments,
            )
        except ExtractionError as e:
            ERROR(f"{source_file}: {e}")
            failed.append(str(source_file))
            continue

        output_file = state.dtsOutputdir / appsettings.outputName_make(
            source_file.relative_to(state.inputdir)
        )
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(f"{declarations}\n" if declarations else "", encoding="utf-8")
        LOG(f"Wrote {output_file}", level=2)
        written.append(str(output_file))

    state.generateResult = {
        "status": not failed,
        "written": written,
        "failed": failed,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display generation results to the user.

    Args:
        inputstate: Program state with generateResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if generation did not run or any file failed
    """
    state: ProgramState = inputstate.copy()
    if not state.generateResult:
        print("Error: Generation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG(f"\n✓ Generated {len(state.generateResult['written'])} declaration files", level=1)
        LOG(f"  Output: {state.dtsOutputdir}", level=1)

    if not state.generateResult["status"]:
        for failed in state.generateResult["failed"]:
            print(f"Error: could not generate declarations for {failed}", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="tsdeclare - Ambient declaration generator",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - generate declaration files for a source tree.

    Orchestrates the full pipeline:
        1. env_check: Resolve configuration and output directory
        2. sources_discover: Select source files
        3. declarations_generate: Extract and write each declaration file
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source files
        outputdir: Directory where declaration files will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_discover, declarations_generate, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
