"""Read-only git queries used for version inference."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

logger = logging.getLogger(__name__)

# Peeled commit for annotated tags, the tag's own object otherwise.
_TAG_FORMAT = "%(refname) %(if)%(*objectname)%(then)%(*objectname)%(else)%(objectname)%(end)"


class GitCommandError(RuntimeError):
    """A git command exited non-zero or could not be started."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"{' '.join(self.command)} failed with exit code {returncode}{detail}")


class VersionControlReader(Protocol):
    """What the locator needs from version control."""

    def current_branch(self) -> str:
        """Return the name of the checked out branch."""

    def ref_tags(self) -> List[str]:
        """Return one ``refs/tags/<name> [<commit>]`` line per tag."""

    def describe_tag_for_head(self, tag_name: str) -> Optional[str]:
        """Return ``git describe`` output for HEAD against a single tag, if any."""

    def commit_count_for_head(self) -> int:
        """Return the number of commits reachable from HEAD."""


class GitReadOnlyCommands:
    """VersionControlReader backed by the git executable."""

    def __init__(
        self,
        repo_dir: Union[str, Path] = ".",
        git_executable: str = "git",
        timeout: Optional[float] = 30,
    ):
        self.repo_dir = Path(repo_dir)
        self.git_executable = git_executable
        self.timeout = timeout

    def _run(self, *args: str) -> str:
        command = [self.git_executable, *args]
        logger.debug("Running %s in %s", command, self.repo_dir)
        try:
            result = subprocess.run(
                command,
                cwd=str(self.repo_dir),
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(command, e.returncode, e.stderr or "") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(command, None, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise GitCommandError(command, None, str(e)) from e
        return result.stdout.strip()

    def current_branch(self) -> str:
        try:
            return self._run("symbolic-ref", "--short", "-q", "HEAD")
        except GitCommandError as e:
            if e.returncode == 1:
                return "HEAD"  # detached
            raise

    def ref_tags(self) -> List[str]:
        out = self._run("for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def describe_tag_for_head(self, tag_name: str) -> Optional[str]:
        out = self._run("describe", "HEAD", "--tags", "--long", "--match", tag_name)
        return out or None

    def commit_count_for_head(self) -> int:
        try:
            out = self._run("rev-list", "--count", "HEAD")
        except GitCommandError:
            # Unborn HEAD: a repository without commits has nothing to count.
            if self._run("rev-parse", "--is-inside-work-tree") == "true" and not self._has_head():
                return 0
            raise
        return int(out)

    def _has_head(self) -> bool:
        try:
            self._run("rev-parse", "--verify", "--quiet", "HEAD")
        except GitCommandError:
            return False
        return True
