"""Shared fixtures: an in-memory VersionControlReader and throwaway git repos."""

import shutil
import subprocess

import pytest


class FakeReader:
    """VersionControlReader answering from dictionaries.

    ``descriptions`` maps tag name to describe output; a value that is an
    exception instance is raised instead. Tags missing from the mapping
    describe as None. ``commits`` optionally maps tag name to its commit.
    """

    def __init__(self, tags=(), descriptions=None, commit_count=10, branch="main", commits=None):
        self.tags = list(tags)
        self.descriptions = dict(descriptions or {})
        self.commits = dict(commits or {})
        self.commit_count = commit_count
        self.branch = branch
        self.described = []
        self.counted = 0

    def current_branch(self):
        return self.branch

    def ref_tags(self):
        return [f"refs/tags/{name} {self.commits.get(name, '')}".strip() for name in self.tags]

    def describe_tag_for_head(self, tag_name):
        self.described.append(tag_name)
        result = self.descriptions.get(tag_name)
        if isinstance(result, Exception):
            raise result
        return result

    def commit_count_for_head(self):
        self.counted += 1
        return self.commit_count


@pytest.fixture
def fake_reader():
    return FakeReader


def _git(repo, *args):
    return subprocess.run(["git", *args], cwd=str(repo), check=True, capture_output=True, text=True).stdout.strip()


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository with a committer identity, plus commit/tag/git helpers."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q", "-b", "main")
    _git(repo, "config", "user.email", "dev@example.com")
    _git(repo, "config", "user.name", "Dev")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "config", "tag.gpgsign", "false")

    counter = {"n": 0}

    def commit(message=None):
        counter["n"] += 1
        _git(repo, "commit", "-q", "--allow-empty", "-m", message or f"commit {counter['n']}")

    def tag(name, annotated=False):
        if annotated:
            _git(repo, "tag", "-a", name, "-m", name)
        else:
            _git(repo, "tag", name)

    def git(*args):
        return _git(repo, *args)

    return repo, commit, tag, git
