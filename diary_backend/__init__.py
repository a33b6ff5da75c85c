"""
日記データの読み取り API
"""
from .models import DiaryDecodeError, DiaryEntry, DiaryStats, parse_timestamp
from .remote import FetchResult, RemoteDiarySource
from .store import DiaryStore, load_entries

__all__ = [
    "DiaryDecodeError",
    "DiaryEntry",
    "DiaryStats",
    "DiaryStore",
    "FetchResult",
    "RemoteDiarySource",
    "load_entries",
    "parse_timestamp",
]
