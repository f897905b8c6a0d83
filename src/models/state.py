"""
Run state for the command-line build step

ProgramState is handed from stage to stage; each stage works on a copy and
fills in the fields it owns. pipeline() chains the stages.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Everything one build run knows.

    Set from the command line:
        inputdir, outputdir: Positional directories
        verbosity: 1 summary, 2 per file, 3 per line
        pattern: Glob replacing the configured entrypoints
        configFile: Project file name, relative to inputdir
        outputSubdir: Directory inside outputdir receiving the declarations
        clean: Delete previously generated declaration files first
        noComments: Leave documentation blocks out
        singleLine: Read non-constant declarations from their opening line only

    Filled in by the stages:
        env_check → envOK, projectConfig, dtsOutputdir, keepComments,
                    multilineDeclarations
        sources_discover → sourceFiles
        declarations_generate → generateResult (status, written, failed)
    """

    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: Optional[str] = field(default=None)
    configFile: str = field(default="tsdeclare.yaml")
    outputSubdir: str = field(default=".")
    clean: bool = field(default=False)
    noComments: bool = field(default=False)
    singleLine: bool = field(default=False)

    envOK: bool = field(default=False)
    projectConfig: Optional[Any] = field(default=None)  # lib.project.ProjectConfig
    dtsOutputdir: Path = field(default=Path("/"))
    keepComments: bool = field(default=True)
    multilineDeclarations: bool = field(default=True)
    sourceFiles: List[Path] = field(default_factory=list)
    generateResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Build the initial state from parsed options.

        Options that are not state fields (those added by the plugin
        framework, for instance) are dropped.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        values = {name: value for name, value in vars(options).items() if name in known}
        values.update(inputdir=inputdir, outputdir=outputdir)
        return cls(**values)

    def copy(self: PS) -> PS:
        """Shallow copy for the next stage to modify"""
        return dataclasses.replace(self)


def pipeline(state: ProgramState, *stages: Callable[[ProgramState], ProgramState]) -> ProgramState:
    """
    Run stages in order, feeding each the state the previous one returned.

    Example:
        pipeline(state, env_check, sources_discover, declarations_generate, results_report)
    """
    return reduce(lambda current, stage: stage(current), stages, state)
