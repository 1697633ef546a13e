"""Data models for the PR comment rate analyzer."""

import json
from dataclasses import dataclass, field
from typing import List

from dataclasses_json import dataclass_json

from .config import GITHUB_BASE_URL
from .exceptions import NoCommentsError


@dataclass_json
@dataclass(frozen=True)
class RepositoryRef:
    """A GitHub repository identified by owner and name."""
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def pull_url(self, number: int) -> str:
        return f"{GITHUB_BASE_URL}/{self.slug}/pull/{number}"

    def __str__(self) -> str:
        return self.slug


@dataclass_json
@dataclass(frozen=True)
class PullRequestTarget:
    """A single pull request to analyze."""
    repository: RepositoryRef
    number: int

    @property
    def url(self) -> str:
        return self.repository.pull_url(self.number)

    def __str__(self) -> str:
        return f"{self.repository.slug}#{self.number}"


@dataclass_json
@dataclass
class PullRequestCommentCounts:
    """Comments written by the token owner on one pull request."""
    repository: RepositoryRef
    number: int
    review_comments: int = 0  # PR-level review bodies
    inline_comments: int = 0  # comments attached to diff lines
    issue_comments: int = 0  # conversation tab comments

    @property
    def total(self) -> int:
        return self.review_comments + self.inline_comments + self.issue_comments

    @property
    def url(self) -> str:
        return self.repository.pull_url(self.number)


@dataclass_json
@dataclass
class CommentRateReport:
    """Result of a review session analysis."""
    user_login: str
    minutes: int
    additional: int = 0
    pull_requests: List[PullRequestCommentCounts] = field(default_factory=list)

    @property
    def detected_comments(self) -> int:
        return sum(pr.total for pr in self.pull_requests)

    @property
    def total_comments(self) -> int:
        return self.detected_comments + self.additional

    @property
    def minutes_per_comment(self) -> float:
        """Average minutes spent per comment.

        Raises:
            NoCommentsError: if neither the API nor the additional count
                contributed a single comment.
        """
        total = self.total_comments
        if total == 0:
            raise NoCommentsError(
                f"No comments found for {self.user_login} across "
                f"{len(self.pull_requests)} pull request(s); cannot compute time per comment."
            )
        return self.minutes / total

    def summary_line(self) -> str:
        return (
            f"Total comments: {self.total_comments} "
            f"({self.detected_comments} detected + {self.additional} additional) "
            f"over {self.minutes} minutes: {self.minutes_per_comment:.2f} minutes per comment"
        )

    def to_summary_json(self) -> str:
        """Serialize the report, including the computed totals and rate."""
        report_dict = self.to_dict()
        report_dict.update(
            detected_comments=self.detected_comments,
            total_comments=self.total_comments,
            minutes_per_comment=round(self.minutes_per_comment, 2),
        )
        for pr_dict, counts in zip(report_dict["pull_requests"], self.pull_requests):
            pr_dict["total"] = counts.total
        return json.dumps(report_dict, ensure_ascii=False, indent=2)
