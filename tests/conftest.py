import pytest

from diary_backend.models import DiaryEntry
from diary_backend.remote import FetchResult


class FakeRemote:
    """テスト用のリモート日記 API"""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def entries():
    return [
        DiaryEntry(id=1, content="初詣", date="2024-01-01", tags=("x", "family"), mood="happy"),
        DiaryEntry(id=2, content="雪", date="2024-02-01", tags=("y",), images=("snow.jpg",), location="札幌"),
        DiaryEntry(id=3, content="散歩", date="2024-01-15T09:30:00+09:00", images=(), tags=("family",)),
    ]


@pytest.fixture
def remote_entries():
    return [
        DiaryEntry(id=10, content="remote old", date="2023-05-01", mood="calm"),
        DiaryEntry(id=11, content="remote new", date="2023-06-01", images=("a.png",)),
    ]


@pytest.fixture
def ok_remote(remote_entries):
    return FakeRemote(result=FetchResult.success(remote_entries))


@pytest.fixture
def failing_remote():
    return FakeRemote(result=FetchResult.failure("HTTP 503"))
