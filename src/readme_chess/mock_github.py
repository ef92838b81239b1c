"""Stand-in issue for scenario replays: records what the bot does and checks it against expectations."""
from __future__ import annotations

import re


class MockIssue:
    """IssueHandle that matches comments against expected regexes and labels against an expected multiset."""

    def __init__(self, title: str = ""):
        self._title = title
        self.closed = False
        self.comments: list[str] = []
        self.labels: list[str] = []
        self._expected_labels: list[str] = []
        self._expected_comments: list[str] = []
        self._unexpected_labels: list[str] = []
        self._unexpected_comments: list[str] = []

    @property
    def title(self) -> str:
        return self._title

    # ---------------- IssueHandle -----------------
    def create_comment(self, body: str) -> None:
        self.comments.append(body)
        if self._expected_comments and re.fullmatch(self._expected_comments[0], body, flags=re.S):
            self._expected_comments.pop(0)
        else:
            self._unexpected_comments.append(body)

    def close(self, labels: list[str] | None = None) -> None:
        self.closed = True
        if labels is not None:
            self.add_labels(*labels)

    def add_labels(self, *labels: str) -> None:
        for label in labels:
            self.labels.append(label)
            if label in self._expected_labels:
                self._expected_labels.remove(label)
            else:
                self._unexpected_labels.append(label)

    # ---------------- Expectations -----------------
    def expect_labels(self, labels: list[str]) -> None:
        self._expected_labels = list(labels)

    def expect_comments(self, regex_list: list[str]) -> None:
        self._expected_comments = list(regex_list)

    def expectations_fulfilled(self) -> tuple[bool, str | None]:
        if self._expected_labels:
            return False, f"Missing expected labels: {self._expected_labels}"
        if self._expected_comments:
            return False, f"Missing expected comments: {self._expected_comments}"
        if self._unexpected_labels:
            return False, f"Unexpected labels: {self._unexpected_labels}"
        if self._unexpected_comments:
            return False, f"Unexpected comments: {self._unexpected_comments}"
        if not self.closed:
            return False, "Issue not closed"
        return True, None
