"""Tests for abi_bindgen.codegen.pipeline."""

from __future__ import annotations

import ast
import json
from pathlib import Path

import pytest

from abi_bindgen.codegen import generate_binding
from abi_bindgen.codegen.core.config import BuildConfig, GenerationTarget, GeneratorConfig
from abi_bindgen.codegen.core.generator import BindingGenerator, GenerationError
from abi_bindgen.codegen.core.schema import ContractAbi
from abi_bindgen.codegen.pipeline import BuildError, BuildPipeline, Stage, TargetState


class RecordingGenerator(BindingGenerator):
    """Test double that echoes the staged document it was given."""

    calls: list[tuple[str, Path, str]] = []

    @property
    def language_name(self) -> str:
        return "echo"

    @property
    def file_extension(self) -> str:
        return ".txt"

    def load_contract(self) -> ContractAbi:
        self.staged_text = self.abi_path.read_text(encoding="utf-8")
        RecordingGenerator.calls.append((self.name, self.abi_path, self.staged_text))
        return ContractAbi(name=self.name)

    def render(self, contract: ContractAbi) -> str:
        return f"# {self.name}\n{self.staged_text}"


class FailingGenerator(RecordingGenerator):
    def render(self, contract: ContractAbi) -> str:
        raise GenerationError("cannot resolve type")


@pytest.fixture(autouse=True)
def reset_calls():
    RecordingGenerator.calls = []
    yield
    RecordingGenerator.calls = []


def _config(targets, staging_dir: Path, **settings) -> BuildConfig:
    return BuildConfig(
        generator=GeneratorConfig(staging_dir=str(staging_dir), **settings),
        targets=targets,
    )


def _pipeline(config: BuildConfig, generator_class=RecordingGenerator) -> BuildPipeline:
    return BuildPipeline(config, lambda name, path: generator_class(name, path, config.generator))


def test_underscore_value_reaches_generator_sanitized(
    tmp_path: Path, staging_dir: Path
) -> None:
    abi = tmp_path / "reserved.abi.json"
    abi.write_text('{"name": "_reserved"}', encoding="utf-8")
    output = tmp_path / "out" / "reserved.txt"

    report = _pipeline(
        _config([GenerationTarget(abi, output, "Reserved")], staging_dir)
    ).run()

    (name, staged_path, staged_text) = RecordingGenerator.calls[0]
    assert name == "Reserved"
    assert staged_path != abi
    assert staged_text == '{"name": "u_reserved"}'
    assert abi.read_text(encoding="utf-8") == '{"name": "_reserved"}'
    assert output.read_text(encoding="utf-8") == '# Reserved\n{"name": "u_reserved"}\n'
    assert report.results[0].state == TargetState.WRITTEN


def test_clean_document_is_staged_identically(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    target = GenerationTarget(erc20_abi_path, tmp_path / "token.txt", "Token")

    _pipeline(_config([target], staging_dir)).run()

    assert RecordingGenerator.calls[0][2] == erc20_abi_path.read_text(encoding="utf-8")


def test_two_targets_produce_two_outputs(
    erc20_abi_path: Path, underscore_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    first = GenerationTarget(erc20_abi_path, tmp_path / "out" / "token.txt", "Token")
    second = GenerationTarget(underscore_abi_path, tmp_path / "out" / "legacy.txt", "Legacy")
    pipeline = _pipeline(_config([first], staging_dir))
    pipeline.run()
    first_output = first.output_path.read_bytes()

    report = _pipeline(_config([first, second], staging_dir)).run()

    assert report.outputs == [first.output_path, second.output_path]
    assert first.output_path.read_bytes() == first_output
    assert second.output_path.read_text(encoding="utf-8").startswith("# Legacy\n")
    assert '"u_from"' in second.output_path.read_text(encoding="utf-8")
    assert '"u_from"' not in first.output_path.read_text(encoding="utf-8")

    staged_paths = [call[1] for call in RecordingGenerator.calls]
    assert len(set(staged_paths)) == len(staged_paths)


def test_staging_files_are_removed_by_default(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    target = GenerationTarget(erc20_abi_path, tmp_path / "token.txt", "Token")

    _pipeline(_config([target], staging_dir)).run()

    assert list(staging_dir.iterdir()) == []


def test_keep_staging_policy(erc20_abi_path: Path, tmp_path: Path, staging_dir: Path) -> None:
    target = GenerationTarget(erc20_abi_path, tmp_path / "token.txt", "Token")

    _pipeline(_config([target], staging_dir, keep_staging=True)).run()

    (staged,) = staging_dir.iterdir()
    assert staged.name.startswith("Token-")


def test_unreadable_input_aborts_before_writing(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    missing = GenerationTarget(tmp_path / "missing.abi.json", tmp_path / "missing.txt", "Missing")
    later = GenerationTarget(erc20_abi_path, tmp_path / "token.txt", "Token")

    with pytest.raises(BuildError) as excinfo:
        _pipeline(_config([missing, later], staging_dir)).run()

    assert excinfo.value.stage == Stage.NORMALIZE
    assert excinfo.value.target == missing
    assert isinstance(excinfo.value.cause, OSError)
    assert "Missing" in str(excinfo.value)
    assert not missing.output_path.exists()
    assert not later.output_path.exists()
    assert RecordingGenerator.calls == []


def test_generator_failure_is_reported_as_generate_stage(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    output = tmp_path / "token.txt"
    output.write_text("previous", encoding="utf-8")
    target = GenerationTarget(erc20_abi_path, output, "Token")

    with pytest.raises(BuildError) as excinfo:
        _pipeline(_config([target], staging_dir), FailingGenerator).run()

    assert excinfo.value.stage == Stage.GENERATE
    assert isinstance(excinfo.value.cause, GenerationError)
    assert output.read_text(encoding="utf-8") == "previous"
    assert list(staging_dir.iterdir()) == []


def test_unwritable_output_is_reported_as_write_stage(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    output = tmp_path / "token.txt"
    output.mkdir()
    target = GenerationTarget(erc20_abi_path, output, "Token")

    with pytest.raises(BuildError) as excinfo:
        _pipeline(_config([target], staging_dir)).run()

    assert excinfo.value.stage == Stage.WRITE
    assert isinstance(excinfo.value.cause, OSError)


def test_staging_removal_failure_is_reported_as_cleanup_stage(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path, monkeypatch
) -> None:
    def refuse_unlink(self, missing_ok=False):
        raise PermissionError(f"cannot remove {self}")

    monkeypatch.setattr(Path, "unlink", refuse_unlink)
    output = tmp_path / "token.txt"
    target = GenerationTarget(erc20_abi_path, output, "Token")

    with pytest.raises(BuildError) as excinfo:
        _pipeline(_config([target], staging_dir)).run()

    assert excinfo.value.stage == Stage.CLEANUP
    assert isinstance(excinfo.value.cause, PermissionError)
    assert output.read_text(encoding="utf-8").startswith("# Token\n")


def test_invalid_marker_fails_in_normalize_stage(
    erc20_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    target = GenerationTarget(erc20_abi_path, tmp_path / "token.txt", "Token")

    with pytest.raises(BuildError) as excinfo:
        _pipeline(_config([target], staging_dir, marker_prefix="_")).run()

    assert excinfo.value.stage == Stage.NORMALIZE


def test_default_factory_uses_python_generator(
    underscore_abi_path: Path, tmp_path: Path, staging_dir: Path
) -> None:
    output = tmp_path / "src" / "abi" / "legacy.py"
    config = _config([GenerationTarget(underscore_abi_path, output, "Legacy")], staging_dir)

    report = BuildPipeline(config).run()

    code = output.read_text(encoding="utf-8")
    ast.parse(code)
    assert "u_from: str" in code
    assert report.results[0].metadata["language"] == "python"
    assert list(staging_dir.iterdir()) == []


def test_generate_binding_single_target(erc20_abi_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "token.py"

    report = generate_binding(erc20_abi_path, output, name="Token")

    assert output.exists()
    assert any("constructor" in w for w in report.warnings)


def test_unsanitized_document_would_be_rejected(underscore_abi_path: Path) -> None:
    # The python generator itself refuses underscore names; the pipeline's
    # normalization step is what makes the document acceptable.
    from abi_bindgen.codegen.languages.python import PythonBindingGenerator

    with pytest.raises(GenerationError):
        PythonBindingGenerator("Legacy", underscore_abi_path).generate()

    assert json.loads(underscore_abi_path.read_text(encoding="utf-8"))[0]["inputs"][0]["name"] == "_from"
