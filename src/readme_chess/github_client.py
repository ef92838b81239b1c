"""
GitHub transport for issue commands (PyGithub).

The rest of the code only talks to IssueHandle: read the title, reply, close,
label. GithubIssue adapts a PyGithub issue to it; mock_github.MockIssue is the
stand-in used by the self-test.
"""
from __future__ import annotations

import logging
from typing import Protocol

from github import Auth, Github
from github.Issue import Issue

log = logging.getLogger("github_client")


class IssueHandle(Protocol):
    @property
    def title(self) -> str: ...

    def create_comment(self, body: str) -> None: ...

    def close(self, labels: list[str] | None = None) -> None: ...

    def add_labels(self, *labels: str) -> None: ...


class GithubIssue:
    def __init__(self, issue: Issue):
        self._issue = issue

    @property
    def title(self) -> str:
        return self._issue.title or ""

    @property
    def number(self) -> int:
        return self._issue.number

    @property
    def author(self) -> str:
        return "@" + self._issue.user.login

    def create_comment(self, body: str) -> None:
        self._issue.create_comment(body)

    def close(self, labels: list[str] | None = None) -> None:
        # edit(labels=...) replaces the issue's labels
        if labels is None:
            self._issue.edit(state="closed")
        else:
            self._issue.edit(state="closed", labels=labels)

    def add_labels(self, *labels: str) -> None:
        self._issue.add_to_labels(*labels)


def fetch_issue(repository: str, number: int, token: str = "") -> GithubIssue:
    client = Github(auth=Auth.Token(token)) if token else Github()
    issue = client.get_repo(repository).get_issue(number)
    log.info("Fetched %s#%d %r by @%s", repository, number, issue.title, issue.user.login)
    return GithubIssue(issue)
