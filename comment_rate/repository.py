"""Resolve GitHub repositories from slugs, URLs and git remotes."""

import re
import subprocess
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from loguru import logger

from .config import GIT_REMOTE, GIT_TIMEOUT, GITHUB_HOSTS
from .exceptions import RepositoryDetectionError, RepositoryParseError
from .models import PullRequestTarget, RepositoryRef

# Owner and repository names GitHub accepts
NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

# scp-like git remotes: git@github.com:owner/repo.git
SCP_PATTERN = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/\\].*)$")

PULL_SEGMENTS = ("pull", "pulls")


def _split_path(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


def _check_host(host: Optional[str], identifier: str) -> None:
    if not host or host.lower() not in GITHUB_HOSTS:
        raise RepositoryParseError(
            f"Not a GitHub repository: {identifier!r}. Only github.com repositories are supported."
        )


def _build_ref(owner: str, name: str, identifier: str) -> RepositoryRef:
    if name.endswith(".git"):
        name = name[: -len(".git")]

    for part in (owner, name):
        if not NAME_PATTERN.match(part) or part in (".", ".."):
            raise RepositoryParseError(
                f"Invalid repository {identifier!r}: {part!r} is not a valid owner or repository name."
            )
    return RepositoryRef(owner=owner, name=name)


def _with_scheme(identifier: str) -> str:
    """Prefix bare ``github.com/...`` identifiers with a scheme so urlparse can read them."""
    lowered = identifier.lower()
    if any(lowered.startswith(f"{host}/") for host in GITHUB_HOSTS):
        return f"https://{identifier}"
    return identifier


def parse_repository(identifier: str) -> RepositoryRef:
    """Parse a repository identifier into owner and name.

    Accepted forms:
        owner/repo
        https://github.com/owner/repo[.git][/...]
        github.com/owner/repo
        git@github.com:owner/repo[.git]
        ssh://git@github.com/owner/repo[.git]
        git://github.com/owner/repo[.git]

    Raises:
        RepositoryParseError: if the identifier is empty, not on GitHub,
            or does not name exactly one owner and repository.
    """
    if identifier is None or not identifier.strip():
        raise RepositoryParseError("Repository identifier is empty. Expected: owner/repo or https://github.com/owner/repo")

    identifier = _with_scheme(identifier.strip())

    if "://" in identifier:
        parsed = urlparse(identifier)
        _check_host(parsed.hostname, identifier)
        segments = _split_path(parsed.path)
        if len(segments) < 2:
            raise RepositoryParseError(
                f"Invalid GitHub repository URL: {identifier!r}. Expected: https://github.com/owner/repo"
            )
        return _build_ref(segments[0], segments[1], identifier)

    scp_match = SCP_PATTERN.match(identifier)
    if scp_match:
        _check_host(scp_match.group("host"), identifier)
        segments = _split_path(scp_match.group("path"))
        if len(segments) != 2:
            raise RepositoryParseError(
                f"Invalid git remote: {identifier!r}. Expected: git@github.com:owner/repo.git"
            )
        return _build_ref(segments[0], segments[1], identifier)

    segments = identifier.strip("/").split("/")
    if len(segments) != 2:
        raise RepositoryParseError(f"Invalid repository slug: {identifier!r}. Expected: owner/repo")
    return _build_ref(segments[0], segments[1], identifier)


def parse_pull_request_url(url: str) -> PullRequestTarget:
    """Parse ``https://github.com/owner/repo/pull/<number>`` into a target.

    Trailing segments such as ``/files`` and any ``#fragment`` are ignored.
    """
    if url is None or not url.strip():
        raise RepositoryParseError("Pull request URL is empty.")

    url = _with_scheme(url.strip())
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise RepositoryParseError(f"Not a pull request URL: {url!r}. Expected: https://github.com/owner/repo/pull/123")
    _check_host(parsed.hostname, url)

    segments = _split_path(parsed.path)
    if len(segments) < 4 or segments[2] not in PULL_SEGMENTS:
        raise RepositoryParseError(f"Not a pull request URL: {url!r}. Expected: https://github.com/owner/repo/pull/123")

    number_text = segments[3]
    if not number_text.isdigit() or int(number_text) < 1:
        raise RepositoryParseError(f"Invalid pull request number {number_text!r} in {url!r}")

    repository = _build_ref(segments[0], segments[1], url)
    return PullRequestTarget(repository=repository, number=int(number_text))


def read_remote_url(remote: str = GIT_REMOTE) -> str:
    """Return the URL configured for ``remote`` in the current git repository."""
    try:
        result = subprocess.run(
            ["git", "config", "--get", f"remote.{remote}.url"],
            capture_output=True,
            text=True,
            check=False,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError as e:
        raise RepositoryDetectionError("Failed to run git. Make sure git is installed.") from e
    except subprocess.TimeoutExpired as e:
        raise RepositoryDetectionError(f"git did not answer within {GIT_TIMEOUT} seconds.") from e

    remote_url = result.stdout.strip()
    if result.returncode != 0 or not remote_url:
        raise RepositoryDetectionError(
            f"No URL configured for git remote {remote!r}. "
            "Make sure you are inside a git repository with that remote."
        )
    return remote_url


def detect_repository(remote: str = GIT_REMOTE) -> RepositoryRef:
    """Detect the GitHub repository from the git remote of the working directory."""
    remote_url = read_remote_url(remote)
    logger.debug(f"git remote {remote} -> {remote_url}")

    try:
        repository = parse_repository(remote_url)
    except RepositoryParseError as e:
        raise RepositoryDetectionError(f"Unsupported git remote URL {remote_url!r}: {e}") from e

    logger.info(f"Auto-detected repository: {repository.slug}")
    return repository


def build_targets(
    repository: Optional[RepositoryRef], pr_numbers: Tuple[int, ...], urls: Tuple[str, ...]
) -> List[PullRequestTarget]:
    """Combine PR numbers and PR URLs into an ordered list of unique targets."""
    targets: List[PullRequestTarget] = []
    if pr_numbers:
        if repository is None:
            raise RepositoryParseError("A repository is required to resolve pull request numbers.")
        targets.extend(PullRequestTarget(repository=repository, number=number) for number in pr_numbers)
    targets.extend(parse_pull_request_url(url) for url in urls)

    unique: List[PullRequestTarget] = []
    seen = set()
    for target in targets:
        if target in seen:
            logger.warning(f"Skipping duplicate pull request {target}")
            continue
        seen.add(target)
        unique.append(target)
    return unique
