"""Shared pytest fixtures. No test touches the network."""

import json

import pytest
import requests
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # CLI tests bind a sink to the runner's stderr, which is closed afterwards
    logger.remove()


@pytest.fixture
def make_response():
    def _make(payload, status=200, headers=None, url="https://api.github.com/test"):
        response = requests.Response()
        response.status_code = status
        response._content = json.dumps(payload).encode("utf-8")
        response.headers.update(headers or {})
        response.url = url
        response.reason = "OK" if status < 400 else "Error"
        return response

    return _make
