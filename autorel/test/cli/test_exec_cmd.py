from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest
from typer.testing import CliRunner

import autorel.cli.commands.exec_cmd as exec_cmd
from autorel.cli.app import app
from autorel.core.result import Err, Ok, Result
from autorel.platform.process import ProcessError

runner = CliRunner()


class _Recorder:
    def __init__(self, result: Result[None, ProcessError]) -> None:
        self.result = result
        self.seen: dict[str, object] = {}

    def __call__(
        self, cmd: list[str], cwd: Path, env: Mapping[str, str] | None = None
    ) -> Result[None, ProcessError]:
        self.seen = {"cmd": cmd, "cwd": cwd, "env": dict(env or {})}
        return self.result


def test_exec_injects_token_from_secret_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("NODE_AUTH_TOKEN", raising=False)
    secret = tmp_path / "token"
    secret.write_text("from-file\n")
    (tmp_path / "autorel.toml").write_text(f'secret_file = "{secret.as_posix()}"\n')
    rec = _Recorder(Ok(None))
    monkeypatch.setattr(exec_cmd, "run_passthrough", rec)

    result = runner.invoke(app, ["exec", "--root", str(tmp_path), "--", "npm", "ci", "--silent"])

    assert result.exit_code == 0, result.output
    assert rec.seen["cmd"] == ["npm", "ci", "--silent"]
    assert rec.seen["cwd"] == tmp_path.resolve()
    env = rec.seen["env"]
    assert isinstance(env, dict)
    assert env["NODE_AUTH_TOKEN"] == "from-file"


def test_exec_keeps_env_token(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODE_AUTH_TOKEN", "from-env")
    rec = _Recorder(Ok(None))
    monkeypatch.setattr(exec_cmd, "run_passthrough", rec)

    runner.invoke(app, ["exec", "--root", str(tmp_path), "--", "npm", "whoami"])

    env = rec.seen["env"]
    assert isinstance(env, dict)
    assert env["NODE_AUTH_TOKEN"] == "from-env"


def test_exec_propagates_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODE_AUTH_TOKEN", "t0k")
    failed = Err(ProcessError(command=("npm", "test"), returncode=7, stdout="", stderr=""))
    monkeypatch.setattr(exec_cmd, "run_passthrough", _Recorder(failed))

    result = runner.invoke(app, ["exec", "--root", str(tmp_path), "--", "npm", "test"])

    assert result.exit_code == 7


def test_exec_without_token_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NODE_AUTH_TOKEN", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    rec = _Recorder(Ok(None))
    monkeypatch.setattr(exec_cmd, "run_passthrough", rec)

    result = runner.invoke(app, ["exec", "--root", str(tmp_path), "--", "npm", "ci"])

    assert result.exit_code == 1
    assert "NODE_AUTH_TOKEN is not set" in result.output
    assert rec.seen == {}
