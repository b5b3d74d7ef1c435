"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.frontmatter import RestrictedFrontmatter
from .adapters.idgen import UlidGenerator
from .config import VellumConfig, load_config
from .import_migrate.models import RunContext
from .import_migrate.report import Reporter


@dataclass
class Runtime:
    """Container for all wired components."""
    config: VellumConfig
    codec: RestrictedFrontmatter
    idgen: UlidGenerator
    verbose: bool = False
    quiet: bool = False

    def new_run(self, dry_run: bool) -> RunContext:
        """Fresh context for one workflow invocation."""
        reporter = Reporter(verbose=self.verbose, quiet=self.quiet)
        return RunContext(dry_run=dry_run, reporter=reporter)


def build_runtime(
    config_path: Path | None = None,
    verbose: bool = False,
    quiet: bool = False,
) -> Runtime:
    """Load configuration and wire the codec and id generator."""
    config = load_config(config_path=config_path)
    return Runtime(
        config=config,
        codec=RestrictedFrontmatter(),
        idgen=UlidGenerator(),
        verbose=verbose or config.verbose,
        quiet=quiet,
    )
