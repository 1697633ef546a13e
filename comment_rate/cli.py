"""Command line interface for the PR comment rate analyzer."""

import sys
from typing import Optional, Tuple

import click
from loguru import logger

from .analyzer import analyze
from .config import LOG_FILE, LOG_FORMAT, LOG_LEVEL, LOG_LEVELS, TOKEN_ENV_VAR
from .exceptions import CommentRateError
from .http_client import GitHubClient
from .models import RepositoryRef
from .repository import build_targets, detect_repository, parse_repository
from .utils import format_pull_request_line, log_report_summary, timed


def setup_logging(log_level: str = LOG_LEVEL, log_file: Optional[str] = LOG_FILE):
    """Setup logging configuration."""
    # Remove default logger
    logger.remove()

    # Console logger on stderr keeps stdout for the result
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=log_level,
        colorize=True
    )

    if log_file:
        logger.add(
            log_file,
            format=LOG_FORMAT,
            level=log_level,
            rotation="10 MB",
            retention="7 days"
        )


def resolve_repository(repository: Optional[str], pr_numbers: Tuple[int, ...]) -> Optional[RepositoryRef]:
    """Parse --repository when given; otherwise use the git remote, but only
    when there are PR numbers to resolve against it."""
    if repository:
        return parse_repository(repository)
    if pr_numbers:
        return detect_repository()
    return None


@timed
def run(token: str, minutes: int, repository: Optional[str], additional: int,
        urls: Tuple[str, ...], pr_numbers: Tuple[int, ...], as_json: bool = False) -> None:
    repo_ref = resolve_repository(repository, pr_numbers)
    if repo_ref is not None:
        logger.info(f"Repository: {repo_ref.slug}")

    targets = build_targets(repo_ref, pr_numbers, urls)

    with GitHubClient(token) as client:
        report = analyze(client, minutes, targets, additional=additional)

    log_report_summary(report)
    if as_json:
        click.echo(report.to_summary_json())
        return

    for counts in report.pull_requests:
        click.echo(format_pull_request_line(counts))
    click.echo(report.summary_line())


@click.command()
@click.option(
    '--token', '-t',
    required=True,
    envvar=TOKEN_ENV_VAR,
    show_envvar=True,
    help='GitHub personal access token'
)
@click.option(
    '--minutes', '-m',
    type=click.IntRange(min=0),
    required=True,
    help='Total time spent reviewing, in minutes'
)
@click.option(
    '--repository', '-r',
    default=None,
    help='GitHub repository (owner/repo, https://github.com/owner/repo or a git remote URL). '
         'Auto-detected from the git remote when omitted.'
)
@click.option(
    '--additional', '-a',
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help='Comments the API cannot see, added unconditionally to the total'
)
@click.option(
    '--urls', '-u',
    multiple=True,
    help='Full pull request URL; may be repeated and may span repositories'
)
@click.option(
    '--log-level', '-l',
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar='LOG_LEVEL',
    default=LOG_LEVEL,
    help=f'Logging level, also read from LOG_LEVEL (default: {LOG_LEVEL})'
)
@click.option(
    '--log-file',
    default=LOG_FILE,
    help='Also write logs to this file'
)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print the report as JSON instead of text'
)
@click.argument('pr_numbers', nargs=-1, type=click.IntRange(min=1))
def main(token: str, minutes: int, repository: Optional[str], additional: int,
         urls: tuple, log_level: str, log_file: Optional[str], as_json: bool, pr_numbers: tuple):
    """
    PR comment rate analyzer

    Counts the comments you wrote on the given pull requests (PR-level
    reviews, inline review comments and conversation comments) and reports
    the average number of minutes spent per comment.

    Example usage:

        pr-comment-rate -m 90 -r octocat/hello-world 12 15

        pr-comment-rate -m 45 -a 2 -u https://github.com/octocat/hello-world/pull/12
    """
    if not pr_numbers and not urls:
        raise click.UsageError("Provide at least one PR number or --urls value.")

    setup_logging(log_level.upper(), log_file)

    try:
        run(token, minutes, repository, additional, urls, pr_numbers, as_json=as_json)
    except KeyboardInterrupt:
        logger.warning("Analysis interrupted by user")
        sys.exit(130)
    except CommentRateError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
