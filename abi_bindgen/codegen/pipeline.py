"""
Build pipeline for binding generation.

Processes generation targets one at a time: normalize the ABI document
into a scoped staging file, run the binding generator over it, and write
the result to the target's output path. The first failure aborts the run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from ..logging_config import get_logger
from .core.config import BuildConfig, GenerationTarget, GeneratorConfig
from .core.generator import BindingGenerator
from .core.normalizer import staged_document
from .registry import get_registry

logger = get_logger(__name__)

GeneratorFactory = Callable[[str, Path], BindingGenerator]


class Stage(Enum):
    """Pipeline stage a target failed in."""

    NORMALIZE = "normalize"
    GENERATE = "generate"
    WRITE = "write"
    CLEANUP = "cleanup"


class TargetState(Enum):
    """Per-target progress; strictly linear."""

    UNPROCESSED = "unprocessed"
    NORMALIZED = "normalized"
    GENERATED = "generated"
    WRITTEN = "written"


class BuildError(Exception):
    """A target failed; carries the target, the stage and the cause."""

    def __init__(self, target: GenerationTarget, stage: Stage, cause: Exception):
        self.target = target
        self.stage = stage
        self.cause = cause
        super().__init__(
            f"Target {target.describe()} failed during {stage.value}: {cause}"
        )


@dataclass
class TargetResult:
    """Outcome of one processed target."""

    target: GenerationTarget
    state: TargetState = TargetState.UNPROCESSED
    warnings: List[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)


@dataclass
class BuildReport:
    """Results of a completed run, in target order."""

    results: List[TargetResult] = field(default_factory=list)

    @property
    def outputs(self) -> List[Path]:
        return [r.target.output_path for r in self.results]

    @property
    def warnings(self) -> List[str]:
        return [f"{r.target.name}: {w}" for r in self.results for w in r.warnings]


class BuildPipeline:
    """Runs normalization and generation for an ordered list of targets."""

    def __init__(
        self,
        config: BuildConfig,
        generator_factory: Optional[GeneratorFactory] = None,
    ):
        """
        Initialize pipeline.

        Args:
            config: Generator settings and targets
            generator_factory: ``factory(name, abi_path)`` returning a
                generator; defaults to the registry entry for
                ``config.generator.language``
        """
        self.config = config
        self.generator_factory = generator_factory or self._registry_factory

    @property
    def generator_config(self) -> GeneratorConfig:
        return self.config.generator

    def _registry_factory(self, name: str, abi_path: Path) -> BindingGenerator:
        return get_registry().create_generator(
            self.generator_config.language, name, abi_path, self.generator_config
        )

    def run(self) -> BuildReport:
        """
        Process every target in order.

        Raises:
            BuildError: On the first failing target; later targets are not run
        """
        report = BuildReport()
        total = len(self.config.targets)
        logger.info("Generating bindings for %d target(s)", total)

        for index, target in enumerate(self.config.targets, start=1):
            logger.info("[%d/%d] %s", index, total, target.describe())
            report.results.append(self.process_target(target))

        logger.info("Generated %d binding file(s)", len(report.results))
        return report

    def process_target(self, target: GenerationTarget) -> TargetResult:
        """
        Drive one target through normalize, generate and write.

        Raises:
            BuildError: If any stage fails
        """
        result = TargetResult(target=target)
        settings = self.generator_config
        stage = Stage.NORMALIZE

        try:
            with staged_document(
                target.abi_path,
                name=target.name,
                marker=settings.marker_prefix,
                staging_dir=settings.staging_dir,
                keep=settings.keep_staging,
            ) as staging_path:
                result.state = TargetState.NORMALIZED

                stage = Stage.GENERATE
                generator = self.generator_factory(target.name, staging_path)
                source = generator.generate()
                result.state = TargetState.GENERATED

                stage = Stage.WRITE
                self._write(generator, target.output_path)
                result.state = TargetState.WRITTEN

                # Leaving the block removes the staged copy
                stage = Stage.CLEANUP
        except BuildError:
            raise
        except Exception as e:
            logger.error("%s failed during %s: %s", target.name, stage.value, e)
            raise BuildError(target, stage, e) from e

        result.warnings = list(source.warnings)
        result.metadata = dict(source.metadata)
        for warning in result.warnings:
            logger.warning("%s: %s", target.name, warning)
        logger.debug("Wrote %s", target.output_path)
        return result

    def _write(self, generator: BindingGenerator, output_path: Path):
        if output_path.resolve() == Path(generator.abi_path).resolve():
            raise OSError(f"Refusing to overwrite the staged document {output_path}")
        generator.write_to_file(output_path)


def run_build(
    config: BuildConfig, generator_factory: Optional[GeneratorFactory] = None
) -> BuildReport:
    """Convenience function to run a build pipeline."""
    return BuildPipeline(config, generator_factory).run()
