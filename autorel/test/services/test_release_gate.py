from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeVcs, ReleaseWorld

from autorel.core.config import ReleaseConfig
from autorel.core.result import Err, Ok
from autorel.services.release.gate import check_preconditions, collect_run_context
from autorel.services.release.model import GateDecision


def test_all_good_on_release_branch_proceeds(world: ReleaseWorld) -> None:
    result = check_preconditions(world.run_context(), config=world.config)

    assert isinstance(result, Ok)
    assert result.value.decision is GateDecision.PROCEED


@pytest.mark.parametrize(
    ("changes", "kind"),
    [
        ({"has_token": False}, "token_missing"),
        ({"build_present": False}, "build_missing"),
        ({"missing_tools": ("jq",)}, "tool_missing"),
        ({"is_clean": False}, "dirty_tree"),
        ({"git_user_name": None}, "identity_missing"),
        ({"git_user_email": ""}, "identity_missing"),
    ],
)
def test_fatal_preconditions(world: ReleaseWorld, changes: dict[str, object], kind: str) -> None:
    result = check_preconditions(world.run_context(**changes), config=world.config)

    assert isinstance(result, Err)
    assert result.error.kind == kind


def test_token_checked_before_everything_else(world: ReleaseWorld) -> None:
    ctx = world.run_context(has_token=False, build_present=False, is_clean=False, branch="dev")

    result = check_preconditions(ctx, config=world.config)

    assert isinstance(result, Err)
    assert result.error.kind == "token_missing"
    assert result.error.message == "NODE_AUTH_TOKEN is not set"


def test_fatal_errors_win_over_branch_skip(world: ReleaseWorld) -> None:
    result = check_preconditions(
        world.run_context(branch="dev", is_clean=False), config=world.config
    )

    assert isinstance(result, Err)
    assert result.error.kind == "dirty_tree"


def test_other_branch_skips(world: ReleaseWorld) -> None:
    result = check_preconditions(world.run_context(branch="dev"), config=world.config)

    assert isinstance(result, Ok)
    assert result.value.decision is GateDecision.SKIP
    assert result.value.reason == "Not in 'main' branch (HEAD is dev)"


def test_detached_head_skips(world: ReleaseWorld) -> None:
    result = check_preconditions(world.run_context(branch="HEAD"), config=world.config)

    assert isinstance(result, Ok)
    assert result.value.decision is GateDecision.SKIP


def test_configured_release_branch(world: ReleaseWorld) -> None:
    config = ReleaseConfig(release_branch="release")

    result = check_preconditions(world.run_context(branch="main"), config=config)

    assert isinstance(result, Ok)
    assert result.value.reason == "Not in 'release' branch (HEAD is main)"


def test_collect_run_context(tmp_path: Path) -> None:
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "index.js").write_text("export {}\n", encoding="utf-8")
    vcs = FakeVcs(branch="main", clean=False, user_email=None)
    found = {"git": "/usr/bin/git"}

    ctx = collect_run_context(
        root=tmp_path,
        config=ReleaseConfig(manifest_reader="jq"),
        vcs=vcs,
        has_token=True,
        find_tool=found.get,
    )

    assert ctx.branch == "main"
    assert ctx.is_clean is False
    assert ctx.build_present is True
    assert ctx.has_identity is False
    assert ctx.missing_tools == ("npm", "jq")


def test_collect_run_context_without_build(tmp_path: Path) -> None:
    ctx = collect_run_context(
        root=tmp_path,
        config=ReleaseConfig(),
        vcs=FakeVcs(),
        has_token=False,
        find_tool=lambda name: f"/usr/bin/{name}",
    )

    assert ctx.build_present is False
    assert ctx.has_token is False
    assert ctx.missing_tools == ()
