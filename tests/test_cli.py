from unittest.mock import patch

import pytest
import requests
from typer.testing import CliRunner

from homefeed.cli import main as cli
from homefeed.config.settings import Settings
from homefeed.services.feed_service import FeedService

from conftest import make_session

runner = CliRunner()
BUILD_SESSION = "homefeed.services.feed_service.build_session"


@pytest.fixture
def svc():
    service = FeedService(Settings())
    with patch.object(cli, "get_feed_service", return_value=service):
        yield service


def test_doctor_prints_resolved_url(svc):
    result = runner.invoke(cli.app, ["doctor", "--locale", "xx_YY"])

    assert result.exit_code == 0
    assert "https://feeds.getiantem.org/en_US/feed.json" in result.output


def test_sources_lists_titles(svc, sample_bytes):
    with patch(BUILD_SESSION, return_value=make_session(content=sample_bytes)) as build:
        result = runner.invoke(cli.app, ["sources", "--locale", "zh_CN", "--proxy", "127.0.0.1:8787"])

    assert result.exit_code == 0
    assert "BBC" in result.output
    assert "NYT" in result.output
    assert "2 sources" in result.output
    build.assert_called_once_with("127.0.0.1:8787")


def test_show_prints_source_entries(svc, sample_bytes):
    with patch(BUILD_SESSION, return_value=make_session(content=sample_bytes)):
        result = runner.invoke(cli.app, ["show", "NYT"])

    assert result.exit_code == 0
    assert "http://b.example" in result.output
    assert "http://a.example" not in result.output


def test_show_unknown_source(svc, sample_bytes):
    with patch(BUILD_SESSION, return_value=make_session(content=sample_bytes)):
        result = runner.invoke(cli.app, ["show", "Nobody"])

    assert result.exit_code == 0
    assert "No entries" in result.output


def test_fetch_failure_exits_nonzero(svc):
    failing = make_session(exc=requests.ConnectionError("no route to host"))
    with patch(BUILD_SESSION, return_value=failing):
        result = runner.invoke(cli.app, ["sources"])

    assert result.exit_code == 1
    assert "Fetch failed" in result.output


def test_malformed_feed_exits_nonzero(svc):
    with patch(BUILD_SESSION, return_value=make_session(content=b"not json")):
        result = runner.invoke(cli.app, ["show"])

    assert result.exit_code == 1
    assert "Feed rejected" in result.output
