"""Git repository abstraction.

``Repository`` is the version-control port of the release engine: every
question the engine asks about history (branch, cleanliness, identity,
line attribution, commit summaries) and the one network mutation it makes
(push with tags) go through here.

Usage:
    repo = Repository(Path("/path/to/package"))

    match repo.blame_line("package.json", 3):
        case Ok(sha):
            print(f"version last changed at {sha}")
        case Err(e):
            print(f"blame failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from autorel.core.result import Err, Ok, Result
from autorel.platform.process import ProcessError
from autorel.platform.process import run as run_process

# Local queries only; push runs until git gives up on its own.
_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single ``git status --porcelain`` line."""

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Working tree state.

    Attributes:
        entries: Changed, staged or untracked paths.
    """

    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0


class Repository:
    """Git operations on a single checkout.

    Attributes:
        path: Repository root (where the package manifest lives)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Parse ``git status --porcelain``."""
        result = self._run(["status", "--porcelain"])
        if isinstance(result, Err):
            return Err(self._error("status", result.error, "git status failed"))

        entries: list[StatusEntry] = []
        for line in result.value.splitlines():
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))
        return Ok(GitStatus(entries=tuple(entries)))

    def is_clean(self) -> bool:
        """True if the working tree has no changes.

        Returns False if status cannot be determined.
        """
        match self.status():
            case Ok(status):
                return status.is_clean
            case Err(_):
                return False

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns "HEAD" for a detached checkout, None on error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def config_value(self, key: str) -> str | None:
        """Read a git config value (e.g. ``user.name``), None when unset."""
        result = self._run(["config", key])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def blame_line(self, path: str, line: int) -> Result[str, GitError]:
        """Return the SHA of the commit that last touched ``path:line``.

        Runs ``git blame --line-porcelain -L<line>,+1``; the first token of
        the first output line is the commit hash.
        """
        result = self._run(
            ["--no-pager", "blame", "--line-porcelain", f"-L{line},+1", "--", path]
        )
        if isinstance(result, Err):
            return Err(self._error("blame", result.error, f"git blame failed for {path}"))

        lines = result.value.splitlines()
        sha = lines[0].split(" ", 1)[0].strip() if lines else ""
        if not sha:
            return Err(GitError(command="blame", message=f"empty blame output for {path}:{line}"))
        return Ok(sha)

    def log_summaries(self, since: str) -> Result[list[str], GitError]:
        """Summary lines of the commits in ``since..HEAD``, newest first."""
        result = self._run(["--no-pager", "log", "--pretty=format:%s", f"{since}..HEAD"])
        if isinstance(result, Err):
            return Err(self._error("log", result.error, "git log failed"))
        return Ok([ln for ln in result.value.splitlines() if ln.strip()])

    def push_follow_tags(self) -> Result[str, GitError]:
        """Push the current branch along with annotated tags reachable from it."""
        result = self._run(["push", "--follow-tags"])
        if isinstance(result, Err):
            return Err(self._error("push --follow-tags", result.error, "push failed"))
        return Ok(result.value.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        subcommand = next((a for a in args if not a.startswith("-")), "")
        timeout = None if subcommand == "push" else _GIT_TIMEOUT_SECONDS
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    @staticmethod
    def _error(command: str, error: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=error.stderr.strip() or error.stdout.strip() or fallback,
            returncode=error.returncode,
        )
