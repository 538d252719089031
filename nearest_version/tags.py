"""Tag references and how their names map onto semantic versions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import semver

TAG_REF_PREFIX = "refs/tags/"

# Reported when no tag qualifies. A real v0.0.0 tag parses to the same value;
# VersionDistance.resolution tells the two apart.
UNKNOWN = semver.Version.parse("0.0.0")


@dataclass(frozen=True)
class TagRef:
    name: str
    commit: Optional[str] = None

    @classmethod
    def from_ref(cls, ref: str) -> "TagRef":
        """Build a TagRef from ``refs/tags/<name> [<commit>]``."""
        parts = ref.strip().split()
        if not parts:
            raise ValueError("Empty tag reference")
        name = parts[0]
        if name.startswith(TAG_REF_PREFIX):
            name = name[len(TAG_REF_PREFIX):]
        commit = parts[1] if len(parts) > 1 else None
        return cls(name=name, commit=commit)


@dataclass(frozen=True)
class ParsedTag:
    ref: TagRef
    version: semver.Version

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def commit(self) -> Optional[str]:
        return self.ref.commit

    @property
    def is_normal(self) -> bool:
        return not self.version.prerelease


class TagStrategy:
    """Parses tag names into versions."""

    def parse_tag(self, tag: TagRef) -> Optional[semver.Version]:
        name = tag.name[1:] if tag.name.startswith("v") else tag.name
        try:
            return semver.Version.parse(name)
        except (ValueError, TypeError):
            return None

    def parse_all(self, refs) -> list[ParsedTag]:
        """Parse every ref, dropping the ones that are not versions."""
        parsed = []
        for ref in refs:
            version = self.parse_tag(ref)
            if version is not None:
                parsed.append(ParsedTag(ref, version))
        return parsed
