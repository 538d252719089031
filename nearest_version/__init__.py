"""Locate the nearest semver tags relative to HEAD."""

import logging

from .git import GitCommandError, GitReadOnlyCommands, VersionControlReader
from .locator import NearestVersion, NearestVersionLocator, Resolution, VersionDistance
from .tags import UNKNOWN, ParsedTag, TagRef, TagStrategy

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "GitCommandError",
    "GitReadOnlyCommands",
    "NearestVersion",
    "NearestVersionLocator",
    "ParsedTag",
    "Resolution",
    "TagRef",
    "TagStrategy",
    "UNKNOWN",
    "VersionControlReader",
    "VersionDistance",
    "__version__",
]
