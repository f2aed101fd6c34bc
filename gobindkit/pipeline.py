"""
The build pipeline.

    INIT -> TOOLCHAIN_READY -> GOMOBILE_READY -> MODULES_RESOLVED
         -> WORKSPACE_ASSEMBLED -> COMPILED

Each transition needs the previous one to have succeeded; the first failure
aborts the run with a PipelineError naming the stage. Every stage works on a
snapshot of the environment, which only replaces the pipeline's environment
once the stage has completed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from gobindkit.build.gomobile import TARGET_ALL, compile_gomobile, prepare_gomobile
from gobindkit.config.parser import BuildConfiguration
from gobindkit.core import directory, filesystem
from gobindkit.core.environment import EnvironmentContext
from gobindkit.core.exceptions import GobindKitError, PipelineError
from gobindkit.modules.resolver import ModuleResolver, ResolutionResult
from gobindkit.modules.workspace import WorkspaceAssembler
from gobindkit.toolchain.catalog import ResourceCatalog
from gobindkit.toolchain.provisioner import ToolchainProvisioner
from gobindkit.toolchain.setup import ToolchainPaths, prepare_toolchain

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Pipeline states, named after the step that reaches them."""

    INIT = "init"
    TOOLCHAIN_READY = "toolchain"
    GOMOBILE_READY = "gomobile"
    MODULES_RESOLVED = "modules"
    WORKSPACE_ASSEMBLED = "workspace"
    COMPILED = "compile"


STAGE_ORDER = list(Stage)


@dataclass
class BuildOptions:
    """Run options, usually taken from the command line."""

    home_dir: Path
    base_dir: Path
    resources_url: str
    clear_workspace: bool = False
    targets: Sequence[str] = (TARGET_ALL,)


@dataclass
class BuildResult:
    """What a run produced, up to the stage it stopped at."""

    stage: Stage
    environment: EnvironmentContext
    build_dir: Path
    toolchain: Optional[ToolchainPaths] = None
    resolution: Optional[ResolutionResult] = None
    promoted: List[Path] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)


class BuildPipeline:
    """
    Runs a gomobile build for one configuration.

    Example:
        >>> config = parse_config(Path("gobindkit.yaml"))
        >>> options = BuildOptions(home_dir=get_home_dir(), base_dir=Path("."),
        ...                        resources_url=url)
        >>> result = BuildPipeline(config, options).run()
        >>> print(result.outputs)
    """

    def __init__(
        self,
        config: BuildConfiguration,
        options: BuildOptions,
        environment: Optional[EnvironmentContext] = None,
        provisioner: Optional[ToolchainProvisioner] = None,
    ):
        self.config = config
        self.options = options
        self.environment = environment or EnvironmentContext.from_os_environ()
        self.provisioner = provisioner or ToolchainProvisioner(options.home_dir)
        self.build_dir = directory.get_build_dir(options.home_dir, config.name)
        self.gopath = directory.get_gopath(self.build_dir)
        self.stage = Stage.INIT
        self.result = BuildResult(
            stage=self.stage, environment=self.environment, build_dir=self.build_dir
        )

    def run(self, until: Stage = Stage.COMPILED) -> BuildResult:
        """
        Execute stages in order up to and including until.

        Raises:
            PipelineError: On the first failing stage
        """
        self._prepare_directories()

        steps = [
            (Stage.TOOLCHAIN_READY, self._toolchain_step),
            (Stage.GOMOBILE_READY, self._gomobile_step),
            (Stage.MODULES_RESOLVED, self._modules_step),
            (Stage.WORKSPACE_ASSEMBLED, self._workspace_step),
            (Stage.COMPILED, self._compile_step),
        ]
        for stage, step in steps:
            if STAGE_ORDER.index(stage) > STAGE_ORDER.index(until):
                break
            self._advance(stage, step)

        return self.result

    def _advance(
        self, stage: Stage, step: Callable[[EnvironmentContext], None]
    ) -> None:
        logger.info(f"==> {stage.value}")
        env = self.environment.snapshot()
        try:
            step(env)
        except (GobindKitError, OSError) as e:
            logger.error(f"Stage '{stage.value}' failed: {e}")
            raise PipelineError(stage, e) from e

        self.environment = env
        self.stage = stage
        self.result.stage = stage
        self.result.environment = env

    def _prepare_directories(self) -> None:
        """Create home, base and build directories; clear the workspace on request."""
        try:
            if self.options.clear_workspace:
                logger.info(f"Clearing workspace {self.build_dir}")
                filesystem.remove_tree(self.build_dir)
            for path in (self.options.base_dir, self.options.home_dir, self.build_dir):
                filesystem.ensure_directory(path)
        except GobindKitError as e:
            raise PipelineError(Stage.INIT, e) from e

    def _toolchain_step(self, env: EnvironmentContext) -> None:
        catalog = ResourceCatalog.open(
            directory.get_catalog_path(self.options.home_dir),
            self.options.resources_url,
        )
        self.result.toolchain = prepare_toolchain(
            self.config,
            self.options.targets,
            catalog,
            self.provisioner,
            env,
            self.gopath,
        )

    def _gomobile_step(self, env: EnvironmentContext) -> None:
        prepare_gomobile(env, self.gopath)

    def _modules_step(self, env: EnvironmentContext) -> None:
        gomobile = self.config.build.gomobile
        modules = gomobile.modules if gomobile else []
        resolver = ModuleResolver(env, self.gopath, self.options.base_dir)
        self.result.resolution = resolver.resolve(modules)

    def _workspace_step(self, env: EnvironmentContext) -> None:
        assembler = WorkspaceAssembler(self.gopath / "src")
        self.result.promoted = assembler.assemble(self.result.resolution)

    def _compile_step(self, env: EnvironmentContext) -> None:
        self.result.outputs = compile_gomobile(
            self.config,
            self.options.targets,
            env,
            self.gopath,
            self.options.base_dir,
        )
