import json
from unittest.mock import Mock

import pytest

from homefeed.config.settings import Settings
from homefeed.services.feed_service import FeedService


SAMPLE_FEED = {
    "feeds": {
        "bbc": {
            "feedUrl": "http://feeds.bbci.co.uk/news/rss.xml",
            "title": "BBC",
            "link": "http://www.bbc.co.uk/news",
            "entries": [0, 2],
        },
        "nyt": {
            "feedUrl": "http://rss.nytimes.com/services/xml/rss/nyt/World.xml",
            "title": "NYT",
            "link": "http://www.nytimes.com",
            "entries": [1],
        },
        "untitled": {"feedUrl": "", "title": "", "link": "", "entries": []},
    },
    "entries": [
        {
            "title": "A",
            "link": "http://a.example",
            "image": "http://a.example/a.png",
            "meta": {"description": "  hello world  "},
        },
        {"title": "B", "link": "http://b.example", "image": "", "meta": {}},
        {"title": "C", "link": "http://c.example", "image": "", "meta": {"description": 42}},
    ],
    "generatedAt": "ignored",
}


class Recorder:
    """Plays both FeedProvider and FeedRetriever."""

    def __init__(self):
        self.sources = []
        self.feeds = []
        self.finished = 0

    def add_source(self, name):
        self.sources.append(name)

    def add_feed(self, title, description, image, link):
        self.feeds.append((title, description, image, link))

    def finish(self):
        self.finished += 1


def make_session(content=b"", status_error=None, exc=None):
    response = Mock()
    response.content = content
    response.raise_for_status = Mock(side_effect=status_error)

    session = Mock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value = response
    return session


@pytest.fixture
def sample_bytes():
    return json.dumps(SAMPLE_FEED).encode("utf-8")


@pytest.fixture
def service():
    return FeedService(Settings())


@pytest.fixture
def recorder():
    return Recorder()
