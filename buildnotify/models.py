"""Build metadata models supplied by the CI system for one run."""

from __future__ import annotations

from dataclasses import dataclass, field

SHORT_SHA_LENGTH = 8


def short_sha(commit: str) -> str:
    """First 8 characters of a commit hash; shorter hashes are returned whole."""
    return commit[:SHORT_SHA_LENGTH]


@dataclass(frozen=True)
class Repo:
    owner: str = ""
    name: str = ""
    link: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Author:
    username: str = ""
    name: str = ""
    email: str = ""
    avatar: str = ""

    def __str__(self) -> str:
        return self.username


@dataclass(frozen=True)
class CommitMessage:
    raw: str = ""

    @property
    def title(self) -> str:
        return self.raw.split("\n")[0].strip()

    @property
    def body(self) -> str:
        return "\n".join(self.raw.split("\n")[1:]).strip()

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Build:
    event: str = "push"
    number: int = 0
    parent: int = 0
    commit: str = ""
    ref: str = ""
    branch: str = ""
    tag: str = ""
    pull: str = ""
    deploy_to: str = ""
    status: str = "success"
    link: str = ""
    author: Author = field(default_factory=Author)
    message: CommitMessage = field(default_factory=CommitMessage)
    started: int = 0
    created: int = 0
    finished: int = 0

    @property
    def short_commit(self) -> str:
        return short_sha(self.commit)


@dataclass(frozen=True)
class Job:
    started: int = 0
