"""Count the token owner's comments on pull requests."""

from typing import Any, Dict, Iterable, List

from loguru import logger

from .http_client import GitHubClient
from .models import PullRequestCommentCounts, PullRequestTarget


def is_authored_by(item: Dict[str, Any], login: str) -> bool:
    """Check whether an API item was written by ``login``.

    Deleted accounts come back with ``user: null`` and never match.
    """
    user = item.get("user") or {}
    author = user.get("login")
    return bool(author) and author.lower() == login.lower()


def count_authored(items: Iterable[Dict[str, Any]], login: str) -> int:
    return sum(1 for item in items if is_authored_by(item, login))


def count_review_bodies(reviews: Iterable[Dict[str, Any]], login: str) -> int:
    """Count reviews by ``login`` that carry a written body.

    A bare approval or a review made only of inline comments has an empty
    body; its inline comments are counted separately.
    """
    return sum(
        1 for review in reviews
        if is_authored_by(review, login) and (review.get("body") or "").strip()
    )


class CommentCounter:
    """Counts PR-level, inline and issue-style comments for one user."""

    def __init__(self, client: GitHubClient, user_login: str):
        self.client = client
        self.user_login = user_login

    def count_pull_request(self, target: PullRequestTarget) -> PullRequestCommentCounts:
        repo_url = f"{self.client.api_url}/repos/{target.repository.slug}"
        number = target.number
        logger.info(f"Analyzing PR {target}: {target.url}")

        reviews = self.client.get_paginated(f"{repo_url}/pulls/{number}/reviews")
        inline = self.client.get_paginated(f"{repo_url}/pulls/{number}/comments")
        issue = self.client.get_paginated(f"{repo_url}/issues/{number}/comments")

        counts = PullRequestCommentCounts(
            repository=target.repository,
            number=number,
            review_comments=count_review_bodies(reviews, self.user_login),
            inline_comments=count_authored(inline, self.user_login),
            issue_comments=count_authored(issue, self.user_login),
        )
        logger.debug(
            f"PR {target}: {len(reviews)} reviews, {len(inline)} inline and "
            f"{len(issue)} issue comments fetched; {counts.total} by {self.user_login}"
        )
        return counts

    def count_pull_requests(self, targets: Iterable[PullRequestTarget]) -> List[PullRequestCommentCounts]:
        """Count each target in order, stopping on the first error."""
        return [self.count_pull_request(target) for target in targets]
