"""Helpers for timing and presenting an analysis run."""

import functools
import time
from typing import Any, Callable

from loguru import logger

from .models import CommentRateReport, PullRequestCommentCounts


def timed(func: Callable) -> Callable:
    """Log at debug level how long ``func`` ran, whether it returned or raised.

    Failures are reported once, by the caller that handles them.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        start_time = time.perf_counter()
        outcome = "failed"
        try:
            result = func(*args, **kwargs)
            outcome = "completed"
            return result
        finally:
            logger.debug(f"{func.__name__} {outcome} in {time.perf_counter() - start_time:.2f}s")

    return wrapper


def format_pull_request_line(counts: PullRequestCommentCounts) -> str:
    return (
        f"PR #{counts.number} ({counts.repository.slug}): {counts.total} comments "
        f"[{counts.review_comments} PR-level, {counts.inline_comments} inline, "
        f"{counts.issue_comments} issue]"
    )


def log_report_summary(report: CommentRateReport) -> None:
    """Log analysis summary statistics."""
    logger.info("=" * 50)
    logger.info("SUMMARY")
    logger.info("=" * 50)
    logger.info(f"User: {report.user_login}")
    logger.info(f"Pull requests: {len(report.pull_requests)}")
    logger.info(f"Detected comments: {report.detected_comments}")
    if report.additional:
        logger.info(f"Additional comments: {report.additional}")
    logger.info(f"Total time: {report.minutes} minutes")
    logger.info("=" * 50)
