import json
import time
from unittest.mock import MagicMock

import pytest

from config import Settings
from main import create_app

API_KEY = "sk-test-secret"
ALLOWED = ("http://localhost:5173", "https://cannapliant.vercel.app")


class FakeUpstream:
    """Stand-in for a streaming ``requests.Response``."""

    def __init__(self, status_code=200, chunks=(b'{"ok":true}',), content_type="application/json",
                 delay=0.0, fail_after=None, fail_with=None):
        self.status_code = status_code
        self.chunks = list(chunks)
        self.headers = {"Content-Type": content_type} if content_type else {}
        self.delay = delay
        self.fail_after = fail_after
        self.fail_with = fail_with
        self.closed = False

    def iter_content(self, chunk_size=None):
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise self.fail_with
            if i and self.delay:
                time.sleep(self.delay)
            yield chunk

    def json(self):
        return json.loads(b"".join(self.chunks))

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(api_key=API_KEY, allowed_origins=ALLOWED)


@pytest.fixture
def session():
    session = MagicMock()
    session.post.side_effect = lambda *args, **kwargs: FakeUpstream()
    return session


@pytest.fixture
def make_client(session):
    def _make(settings, **config):
        config.setdefault("TESTING", True)
        config.setdefault("RATELIMIT_ENABLED", False)
        app = create_app(settings, session=session, config=config)
        return app.test_client()
    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
