"""
リモート日記 API からの取得

取得・デコードの失敗はすべて FetchResult.failure に正規化し、例外は投げない。
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import json
import logging

import aiohttp

from .models import DiaryDecodeError, DiaryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """リモート取得の結果（成功時は entries、失敗時は error）"""
    entries: Tuple[DiaryEntry, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, entries) -> "FetchResult":
        return cls(entries=tuple(entries))

    @classmethod
    def failure(cls, message: str) -> "FetchResult":
        return cls(error=message)

    def or_else(self, fallback: Callable[[], List[DiaryEntry]], on_success: Callable[[Tuple[DiaryEntry, ...]], List[DiaryEntry]]) -> List[DiaryEntry]:
        """
        成功時は on_success(entries)、失敗時は警告を出して fallback() を返す

        Args:
            fallback: ローカルデータを返す関数
            on_success: リモートデータを加工する関数

        Returns:
            エントリのリスト
        """
        if self.ok:
            return on_success(self.entries)
        logger.warning(f"[diary] Remote fetch failed, use local diary data: {self.error}")
        return fallback()


def decode_entries(payload) -> List[DiaryEntry]:
    """
    JSON ペイロードをエントリのリストに変換

    Raises:
        DiaryDecodeError: 配列でない、またはレコードが不正な場合
    """
    if not isinstance(payload, list):
        raise DiaryDecodeError(f"diary payload must be a list, got {type(payload).__name__}")
    return [DiaryEntry.from_dict(item) for item in payload]


class RemoteDiarySource:
    """リモート日記 API（GET で DiaryItem[] を返す）"""

    def __init__(self, url: str, timeout: float = 10.0):
        """
        Args:
            url: API のアドレス（空文字の場合は常に失敗扱い）
            timeout: タイムアウト秒数
        """
        self.url = url or ""
        self.timeout = timeout

    async def fetch(self) -> FetchResult:
        """エントリを取得（例外は投げない）"""
        if not self.url:
            return FetchResult.failure("remote diary API is not configured")

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url) as response:
                    if response.status < 200 or response.status >= 300:
                        return FetchResult.failure(f"HTTP {response.status}")
                    body = await response.text()
        except Exception as e:
            return FetchResult.failure(f"{type(e).__name__}: {e}")

        try:
            entries = decode_entries(json.loads(body))
        except (json.JSONDecodeError, DiaryDecodeError) as e:
            return FetchResult.failure(f"{type(e).__name__}: {e}")

        logger.debug(f"[diary] Fetched {len(entries)} entries from {self.url}")
        return FetchResult.success(entries)
