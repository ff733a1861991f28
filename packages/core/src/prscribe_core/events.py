"""Typed view of the GitHub ``pull_request`` webhook payload.

Only the fields the review pipeline reads are declared; everything else in
the payload is ignored. A payload missing any of them fails validation and
is acknowledged without starting a review.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Owner(_Payload):
    login: str = Field(min_length=1)


class Repository(_Payload):
    owner: Owner
    name: str = Field(min_length=1)


class Head(_Payload):
    sha: str = Field(min_length=1)


class PullRequest(_Payload):
    number: int
    title: str = ""
    head: Head


class PullRequestEvent(_Payload):
    action: str
    repository: Repository
    pull_request: PullRequest

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name

    @property
    def number(self) -> int:
        return self.pull_request.number

    @property
    def title(self) -> str:
        return self.pull_request.title

    @property
    def head_sha(self) -> str:
        return self.pull_request.head.sha

    @property
    def label(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"
