import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple

from .cli_logger import logger
from .emitter import BuildDirectives, emit
from .errors import OverrideNotFound
from .registry import LinkConfiguration, OverrideRegistry
from .triple import TargetTriple
from .utils.command_executor import run_shell_command


@dataclass(frozen=True)
class BuildOutcome:
    """Which path a build invocation took and whether it ended in success."""

    triple: TargetTriple
    strategy: str
    succeeded: bool
    directives: Optional[BuildDirectives] = None
    returncode: Optional[int] = None


class BuildStrategy(ABC):
    name: ClassVar[str] = ""

    @abstractmethod
    def apply(self, triple: TargetTriple, store_root, links=None, watch=()) -> BuildOutcome:
        """Carry out the strategy for triple and report the outcome."""


@dataclass(frozen=True)
class UseOverride(BuildStrategy):
    """Link the prebuilt artifact and skip the dependency's own native build."""

    config: LinkConfiguration
    name: ClassVar[str] = "override"

    def apply(self, triple, store_root, links=None, watch=()):
        directives = emit(self.config, store_root, triple=triple, links=links, watch=watch)
        logger.info(f"Using prebuilt {self.config.library} for {triple} from {directives.search_path}")
        return BuildOutcome(triple, self.name, True, directives=directives)


@dataclass(frozen=True)
class UseDefault(BuildStrategy):
    """Leave the native build to the dependency, optionally running a configured command."""

    command: Tuple[str, ...] = ()
    cwd: Optional[str] = None
    verbose: bool = field(default=False, compare=False)
    name: ClassVar[str] = "default"

    def apply(self, triple, store_root=None, links=None, watch=()):
        if not self.command:
            logger.info(f"No default build command configured; {links or 'the dependency'} builds itself for {triple}.")
            return BuildOutcome(triple, self.name, True)

        env = os.environ.copy()
        env["TARGET"] = str(triple)
        logger.info(f"Running default native build for {triple}: {' '.join(self.command)}")

        if self.verbose:
            lines, process = run_shell_command(list(self.command), stream_output=True, env=env, cwd=self.cwd)
            for line in lines:
                logger.step_info(line.rstrip(), indent=2)
            returncode = process.returncode
        else:
            stdout, stderr, returncode = run_shell_command(list(self.command), env=env, cwd=self.cwd)
            if returncode != 0:
                if stdout:
                    logger.error(f"Stdout:\n{stdout}")
                if stderr:
                    logger.error(f"Stderr:\n{stderr}")

        if returncode != 0:
            logger.error(f"Default native build for {triple} failed (Exit Code: {returncode}).")
            return BuildOutcome(triple, self.name, False, returncode=returncode)
        logger.success(f"Default native build for {triple} completed.")
        return BuildOutcome(triple, self.name, True, returncode=returncode)


def select_strategy(registry: OverrideRegistry, triple: TargetTriple, default_command=(), cwd=None, verbose=False) -> BuildStrategy:
    """Pick the build strategy for triple: its override when listed, the default build otherwise."""
    try:
        config = registry.lookup(triple)
    except OverrideNotFound:
        logger.info(f"No override for {triple}; falling back to the default native build.")
        return UseDefault(tuple(default_command), cwd=cwd, verbose=verbose)
    return UseOverride(config)
