"""Settings for running the locator against a repository."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .git import GitReadOnlyCommands
from .locator import NearestVersionLocator
from .tags import TagStrategy

ENV_PREFIX = "NEAREST_VERSION_"


def _parse_timeout(name: str, raw: str) -> Optional[float]:
    value = raw.strip().lower()
    if value in ("", "none", "0"):
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None
    if timeout < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return timeout


@dataclass
class LocatorConfig:
    repo_dir: Path = Path(".")
    git_executable: str = "git"
    timeout: Optional[float] = 30.0  # per git command; None waits forever

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LocatorConfig":
        """Read NEAREST_VERSION_* variables, falling back to the defaults."""
        env = os.environ if environ is None else environ
        config = cls()
        if env.get(ENV_PREFIX + "REPO_DIR"):
            config.repo_dir = Path(env[ENV_PREFIX + "REPO_DIR"])
        if env.get(ENV_PREFIX + "GIT"):
            config.git_executable = env[ENV_PREFIX + "GIT"]
        if ENV_PREFIX + "TIMEOUT" in env:
            config.timeout = _parse_timeout(ENV_PREFIX + "TIMEOUT", env[ENV_PREFIX + "TIMEOUT"])
        return config

    def build_locator(self, logger=None) -> NearestVersionLocator:
        reader = GitReadOnlyCommands(self.repo_dir, self.git_executable, self.timeout)
        return NearestVersionLocator(reader, TagStrategy(), logger=logger)
