"""Review session analysis: comments counted against time spent."""

from typing import Sequence

from loguru import logger

from .comment_counter import CommentCounter
from .exceptions import ConfigurationError
from .http_client import GitHubClient
from .models import CommentRateReport, PullRequestTarget


def analyze(
    client: GitHubClient,
    minutes: int,
    targets: Sequence[PullRequestTarget],
    additional: int = 0,
) -> CommentRateReport:
    """Count the token owner's comments on ``targets`` and build a report.

    The division itself happens lazily on the report so callers decide how
    to present a session with no comments.
    """
    if not targets:
        raise ConfigurationError("At least one pull request is required.")
    if minutes < 0 or additional < 0:
        raise ConfigurationError("Minutes and additional comments must not be negative.")

    user_login = client.get_authenticated_user()
    logger.info(f"Analyzing comments for user: {user_login}")
    logger.info(f"Pull requests to analyze: {len(targets)}")

    counter = CommentCounter(client, user_login)
    counts = counter.count_pull_requests(targets)

    report = CommentRateReport(
        user_login=user_login,
        minutes=minutes,
        additional=additional,
        pull_requests=counts,
    )
    logger.info(
        f"Detected {report.detected_comments} comments across {len(counts)} PRs "
        f"(+{additional} additional)"
    )
    return report
