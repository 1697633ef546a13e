"""Tests for comment counting, the analysis pipeline and the report model."""

import json
from unittest.mock import MagicMock

import pytest

from comment_rate.analyzer import analyze
from comment_rate.comment_counter import (
    CommentCounter,
    count_authored,
    count_review_bodies,
    is_authored_by,
)
from comment_rate.exceptions import ConfigurationError, NoCommentsError, NotFoundError
from comment_rate.http_client import GitHubClient
from comment_rate.models import (
    CommentRateReport,
    PullRequestCommentCounts,
    PullRequestTarget,
    RepositoryRef,
)

HELLO = RepositoryRef(owner="octocat", name="hello-world")
REPO_API = "https://api.github.com/repos/octocat/hello-world"


def item(login, body="Looks good"):
    return {"user": {"login": login} if login else None, "body": body}


def fake_client(pages, login="octocat", api_url="https://api.github.com"):
    """Client double answering get_paginated from a url -> items mapping."""
    client = MagicMock(spec=GitHubClient)
    client.api_url = api_url
    client.get_authenticated_user.return_value = login
    client.get_paginated.side_effect = lambda url, params=None: pages.get(url, [])
    return client


class TestAuthorFilter:
    def test_matches_login_case_insensitively(self):
        assert is_authored_by(item("OctoCat"), "octocat")

    def test_other_author(self):
        assert not is_authored_by(item("hubot"), "octocat")

    def test_deleted_user(self):
        assert not is_authored_by(item(None), "octocat")
        assert not is_authored_by({}, "octocat")

    def test_count_authored(self):
        items = [item("octocat"), item("hubot"), item("octocat"), item(None)]
        assert count_authored(items, "octocat") == 2

    def test_reviews_need_a_body(self):
        reviews = [
            item("octocat", body="Please rename this"),
            item("octocat", body=""),
            item("octocat", body="   "),
            item("octocat", body=None),
            item("hubot", body="Nice"),
        ]
        assert count_review_bodies(reviews, "octocat") == 1


class TestCommentCounter:
    def test_counts_all_three_endpoints(self):
        client = fake_client({
            f"{REPO_API}/pulls/7/reviews": [item("octocat"), item("octocat", body=""), item("hubot")],
            f"{REPO_API}/pulls/7/comments": [item("octocat"), item("octocat"), item("hubot")],
            f"{REPO_API}/issues/7/comments": [item("octocat"), item(None)],
        })

        counts = CommentCounter(client, "octocat").count_pull_request(PullRequestTarget(HELLO, 7))

        assert counts.review_comments == 1
        assert counts.inline_comments == 2
        assert counts.issue_comments == 1
        assert counts.total == 4
        assert counts.url == "https://github.com/octocat/hello-world/pull/7"

    def test_stops_on_first_error(self):
        client = fake_client({})
        client.get_paginated.side_effect = NotFoundError("missing")
        counter = CommentCounter(client, "octocat")

        with pytest.raises(NotFoundError):
            counter.count_pull_requests([PullRequestTarget(HELLO, 1), PullRequestTarget(HELLO, 2)])
        assert client.get_paginated.call_count == 1

    def test_endpoints_use_the_client_api_url(self):
        client = fake_client({}, api_url="https://ghe.example.com/api/v3")

        CommentCounter(client, "octocat").count_pull_request(PullRequestTarget(HELLO, 3))

        requested = [args[0] for args, _ in client.get_paginated.call_args_list]
        assert requested == [
            "https://ghe.example.com/api/v3/repos/octocat/hello-world/pulls/3/reviews",
            "https://ghe.example.com/api/v3/repos/octocat/hello-world/pulls/3/comments",
            "https://ghe.example.com/api/v3/repos/octocat/hello-world/issues/3/comments",
        ]


class TestAnalyze:
    def test_builds_report(self):
        client = fake_client({
            f"{REPO_API}/pulls/1/comments": [item("octocat")] * 3,
            f"{REPO_API}/issues/2/comments": [item("octocat")],
        })

        report = analyze(client, 60, [PullRequestTarget(HELLO, 1), PullRequestTarget(HELLO, 2)], additional=2)

        assert report.user_login == "octocat"
        assert [pr.total for pr in report.pull_requests] == [3, 1]
        assert report.detected_comments == 4
        assert report.total_comments == 6
        assert report.minutes_per_comment == 10

    def test_requires_targets(self):
        with pytest.raises(ConfigurationError):
            analyze(fake_client({}), 10, [])

    def test_rejects_negative_values(self):
        with pytest.raises(ConfigurationError):
            analyze(fake_client({}), -1, [PullRequestTarget(HELLO, 1)])


def _report(minutes, detected, additional=0):
    counts = PullRequestCommentCounts(repository=HELLO, number=1, inline_comments=detected)
    return CommentRateReport(user_login="octocat", minutes=minutes, additional=additional, pull_requests=[counts])


class TestCommentRateReport:
    @pytest.mark.parametrize("minutes,detected,expected", [
        (90, 3, 30.0),
        (10, 4, 2.5),
        (0, 5, 0.0),
        (7, 3, 7 / 3),
    ])
    def test_rate_is_minutes_over_comments(self, minutes, detected, expected):
        assert _report(minutes, detected).minutes_per_comment == pytest.approx(expected)

    def test_additional_always_added(self):
        report = _report(60, 2, additional=4)
        assert report.detected_comments == 2
        assert report.total_comments == 6
        assert report.minutes_per_comment == 10

    def test_additional_alone_is_enough(self):
        assert _report(20, 0, additional=4).minutes_per_comment == 5

    def test_zero_comments_is_an_error(self):
        report = _report(30, 0)
        with pytest.raises(NoCommentsError, match="octocat"):
            report.minutes_per_comment
        with pytest.raises(NoCommentsError):
            report.summary_line()

    def test_summary_line(self):
        assert _report(90, 2, additional=1).summary_line() == (
            "Total comments: 3 (2 detected + 1 additional) over 90 minutes: 30.00 minutes per comment"
        )

    def test_serializes_to_dict(self):
        data = _report(90, 2).to_dict()
        assert data["user_login"] == "octocat"
        assert data["pull_requests"][0]["repository"] == {"owner": "octocat", "name": "hello-world"}
        assert data["pull_requests"][0]["inline_comments"] == 2

    def test_summary_json_includes_computed_values(self):
        data = json.loads(_report(90, 2, additional=1).to_summary_json())
        assert data["detected_comments"] == 2
        assert data["total_comments"] == 3
        assert data["minutes_per_comment"] == 30.0
        assert data["pull_requests"][0]["total"] == 2

    def test_summary_json_with_zero_comments(self):
        with pytest.raises(NoCommentsError):
            _report(30, 0).to_summary_json()
