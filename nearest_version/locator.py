"""Nearest version tag resolution.

Given the tags of a repository, find the tag closest to ``HEAD`` that parses
as a semantic version, both over all tags ("any") and over tags without a
pre-release segment ("normal"). Closeness is the commit count reported by
``git describe``; ties go to the version with the higher semver precedence,
so ``1.0.0`` wins over ``1.0.0-rc.2`` on the same commit.

A tag whose distance cannot be determined never aborts the search. It is
replaced by the ``0.0.0`` placeholder at the total commit count of ``HEAD``,
which is also the answer when no tag qualifies at all.
"""

from __future__ import annotations

import enum
import functools
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

import semver

from .git import VersionControlReader
from .tags import UNKNOWN, ParsedTag, TagRef, TagStrategy

logger = logging.getLogger(__name__)

_COUNT = re.compile(r"[0-9]+")


class Resolution(enum.Enum):
    RESOLVED = "resolved"
    NO_DESCRIPTION = "no-description"  # describe printed nothing
    LOOKUP_FAILED = "lookup-failed"  # describe failed or its output was unreadable
    NO_TAGS = "no-tags"  # nothing to choose from


@dataclass(frozen=True)
class VersionDistance:
    version: semver.Version
    distance: int
    resolution: Resolution = Resolution.RESOLVED
    tag: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.resolution is Resolution.RESOLVED


@dataclass(frozen=True)
class NearestVersion:
    """The nearest tagged versions from ``HEAD`` and how far away they are."""

    any: semver.Version
    normal: semver.Version
    distance_from_any: int
    distance_from_normal: int
    any_result: Optional[VersionDistance] = field(default=None, compare=False, repr=False)
    normal_result: Optional[VersionDistance] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_results(cls, any_result: VersionDistance, normal_result: VersionDistance) -> "NearestVersion":
        return cls(
            any=any_result.version,
            normal=normal_result.version,
            distance_from_any=any_result.distance,
            distance_from_normal=normal_result.distance,
            any_result=any_result,
            normal_result=normal_result,
        )

    def to_dict(self) -> dict:
        return {
            "nearest_any": str(self.any),
            "nearest_any_distance": self.distance_from_any,
            "nearest_normal": str(self.normal),
            "nearest_normal_distance": self.distance_from_normal,
        }


def parse_describe_distance(description: str) -> int:
    """Return the commit count from ``<tag>-<count>-g<hash>[-dirty]``.

    Fewer than three segments means HEAD is the tagged commit. Raises
    ValueError when the count segment is not a number.
    """
    parts = description.strip().split("-")
    if len(parts) > 1 and parts[-1] == "dirty":
        parts = parts[:-1]
    if len(parts) < 3:
        return 0
    count = parts[-2]
    if not _COUNT.fullmatch(count):
        raise ValueError(f"Commit count is not a number: {count!r}")
    return int(count)


def compare_candidates(a: VersionDistance, b: VersionDistance) -> int:
    """Order by distance, then precedence (highest first), then tag name.

    Placeholders sort after real tags at the same distance and precedence.
    """
    if a.distance != b.distance:
        return -1 if a.distance < b.distance else 1
    by_precedence = b.version.compare(a.version)
    if by_precedence:
        return by_precedence
    if a.resolved != b.resolved:
        return -1 if a.resolved else 1
    a_tag, b_tag = a.tag or "", b.tag or ""
    return (a_tag > b_tag) - (a_tag < b_tag)


class NearestVersionLocator:
    """Locates the nearest version tags starting from ``HEAD``."""

    def __init__(
        self,
        reader: VersionControlReader,
        strategy: Optional[TagStrategy] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.reader = reader
        self.strategy = strategy or TagStrategy()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def locate(self) -> NearestVersion:
        self.logger.debug("Locate beginning on branch: %s", self.reader.current_branch())
        commit_count = functools.lru_cache(maxsize=None)(self.reader.commit_count_for_head)

        refs = [TagRef.from_ref(ref) for ref in self.reader.ref_tags() if ref.strip()]
        all_tags = self.strategy.parse_all(refs)
        normal_tags = [tag for tag in all_tags if tag.is_normal]

        # Each tag is described once even though normal tags are in both lists.
        distances: Dict[TagRef, VersionDistance] = {
            tag.ref: self.tag_with_distance(tag, commit_count) for tag in all_tags
        }
        normal = self.find_nearest_version((distances[tag.ref] for tag in normal_tags), commit_count)
        any_ = self.find_nearest_version(distances.values(), commit_count)

        self.logger.debug(
            "Nearest release: %s (distance %d), nearest any: %s (distance %d).",
            normal.version, normal.distance, any_.version, any_.distance,
        )
        return NearestVersion.from_results(any_, normal)

    def find_nearest_version(
        self,
        candidates: Iterable[VersionDistance],
        commit_count: Callable[[], int],
    ) -> VersionDistance:
        candidates = list(candidates)
        if not candidates:
            return VersionDistance(UNKNOWN, commit_count(), Resolution.NO_TAGS)
        return min(candidates, key=functools.cmp_to_key(compare_candidates))

    def tag_with_distance(self, tag: ParsedTag, commit_count: Callable[[], int]) -> VersionDistance:
        try:
            description = self.reader.describe_tag_for_head(tag.name)
            distance = parse_describe_distance(description) if description else None
        except Exception as e:
            self.logger.debug(
                "Could not determine distance to %s at %s: %s", tag.name, tag.commit or "unknown commit", e
            )
            return VersionDistance(UNKNOWN, commit_count(), Resolution.LOOKUP_FAILED, tag.name)

        if distance is None:
            self.logger.debug(
                "No description of HEAD relative to %s at %s", tag.name, tag.commit or "unknown commit"
            )
            return VersionDistance(UNKNOWN, commit_count(), Resolution.NO_DESCRIPTION, tag.name)
        return VersionDistance(tag.version, distance, tag=tag.name)
