"""Tests for the abi-bindgen command line."""

from __future__ import annotations

import ast
import json
from pathlib import Path

import pytest

from abi_bindgen.cli import create_parser, main
from tests._fixtures.abis import UNDERSCORE_ABI_TEXT


def _build_config(directory: Path, targets) -> Path:
    path = directory / "abigen.json"
    path.write_text(json.dumps({"targets": targets}), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = create_parser().parse_args(["build"])

    assert args.config == "abigen.json"
    assert args.keep_staging is False
    assert args.language is None


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "abi-bindgen" in capsys.readouterr().out


def test_sanitize_to_stdout(underscore_abi_path: Path, capsys) -> None:
    assert main(["sanitize", str(underscore_abi_path)]) == 0

    out = capsys.readouterr().out
    assert '"u_from"' in out
    assert '"_from"' not in out


def test_sanitize_to_file(underscore_abi_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "clean.abi.json"

    assert main(["sanitize", str(underscore_abi_path), "-o", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == UNDERSCORE_ABI_TEXT.replace('"_', '"u_')


def test_sanitize_missing_file(tmp_path: Path) -> None:
    assert main(["sanitize", str(tmp_path / "missing.abi.json")]) == 1


def test_sanitize_rejects_bad_marker(underscore_abi_path: Path) -> None:
    assert main(["sanitize", str(underscore_abi_path), "--marker", "_"]) == 1


def test_build_generates_every_target(
    erc20_abi_path: Path, underscore_abi_path: Path, tmp_path: Path
) -> None:
    config = _build_config(
        tmp_path,
        [
            {"name": "Token", "abi": "abi/token.abi.json", "output": "src/abi/token.py"},
            {"name": "Legacy", "abi": "abi/legacy.abi.json", "output": "src/abi/legacy.py"},
        ],
    )
    staging = tmp_path / "staging"
    staging.mkdir()

    assert main(["build", "-c", str(config), "--staging-dir", str(staging)]) == 0

    token = (tmp_path / "src" / "abi" / "token.py").read_text(encoding="utf-8")
    legacy = (tmp_path / "src" / "abi" / "legacy.py").read_text(encoding="utf-8")
    ast.parse(token)
    assert "class Legacy" in legacy
    assert "u_from" in legacy
    assert list(staging.iterdir()) == []


def test_build_keep_staging(erc20_abi_path: Path, tmp_path: Path) -> None:
    config = _build_config(
        tmp_path,
        [{"name": "Token", "abi": "abi/token.abi.json", "output": "token.py"}],
    )
    staging = tmp_path / "staging"
    staging.mkdir()

    exit_code = main(
        ["build", "-c", str(config), "--staging-dir", str(staging), "--keep-staging"]
    )

    assert exit_code == 0
    assert len(list(staging.iterdir())) == 1


def test_build_failure_names_target(erc20_abi_path: Path, tmp_path: Path, capsys) -> None:
    config = _build_config(
        tmp_path,
        [
            {"name": "Ghost", "abi": "abi/ghost.abi.json", "output": "ghost.py"},
            {"name": "Token", "abi": "abi/token.abi.json", "output": "token.py"},
        ],
    )

    assert main(["build", "-c", str(config)]) == 1

    err = capsys.readouterr().err
    assert "Ghost" in err
    assert "normalize" in err
    assert not (tmp_path / "ghost.py").exists()
    assert not (tmp_path / "token.py").exists()


def test_build_with_unknown_language(erc20_abi_path: Path, tmp_path: Path) -> None:
    config = _build_config(
        tmp_path,
        [{"name": "Token", "abi": "abi/token.abi.json", "output": "token.py"}],
    )

    assert main(["build", "-c", str(config), "--language", "cobol"]) == 1


def test_build_with_missing_config(tmp_path: Path) -> None:
    assert main(["build", "-c", str(tmp_path / "abigen.json")]) == 1


def test_languages(capsys) -> None:
    assert main(["languages"]) == 0
    assert "python" in capsys.readouterr().out


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert "0.1.0" in capsys.readouterr().out
