from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from autorel.core.result import Err, Ok, Result
from autorel.output.console import ConsoleProtocol, Style
from autorel.platform.process import ProcessError
from autorel.platform.process import run as run_process
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import BumpKind, PackOutput
from autorel.services.release.timeouts import REGISTRY_TIMEOUT_SECONDS


class NpmRegistry:
    """Registry client backed by the npm CLI.

    ``env`` must already carry the auth token; npm picks it up through the
    ``${NODE_AUTH_TOKEN}`` reference in ``.npmrc``.
    """

    def __init__(
        self,
        *,
        root: Path,
        env: Mapping[str, str],
        console: ConsoleProtocol,
        tool: str = "npm",
    ) -> None:
        self.root = root
        self.env = env
        self.console = console
        self.tool = tool

    def published_fingerprint(self, name: str, version: str) -> str:
        # A never-published version is a normal answer, not a failure.
        result = self._run(["show", f"{name}@{version}", "dist.shasum"], REGISTRY_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return ""
        return result.value.strip()

    def pack_output(self) -> PackOutput:
        result = self._run(["pack", "--dry-run"], merge_stderr=True)
        if isinstance(result, Err):
            # The digest line may still be there; let the parser decide.
            return PackOutput(
                text=result.error.stdout,
                failure=result.error.detail or str(result.error),
            )
        return PackOutput(text=result.value)

    def version_bump(self, kind: BumpKind, message: str) -> Result[str, ReleaseError]:
        result = self._run(["version", kind, "-m", message])
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="bump_failed",
                    message=f"{self.tool} version {kind} failed",
                    hint=result.error.detail,
                )
            )
        return Ok(result.value.strip())

    def publish(self) -> Result[None, ReleaseError]:
        result = self._run(["publish"])
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"{self.tool} publish failed",
                    hint=result.error.detail,
                )
            )
        return Ok(None)

    def _run(
        self,
        args: list[str],
        timeout: float | None = None,
        *,
        merge_stderr: bool = False,
    ) -> Result[str, ProcessError]:
        cmd = [self.tool, *args]
        self.console.print(" ".join(cmd), Style.DIM)
        return run_process(
            cmd,
            cwd=self.root,
            env=self.env,
            timeout=timeout,
            merge_stderr=merge_stderr,
        )
