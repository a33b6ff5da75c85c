"""
日記データの読み取り専用ストア
"""
from typing import Iterable, List, Optional, Sequence
import json
import logging
import os

from .models import DiaryDecodeError, DiaryEntry, DiaryStats
from .remote import FetchResult, RemoteDiarySource, decode_entries

logger = logging.getLogger(__name__)


def load_entries(path: Optional[str]) -> List[DiaryEntry]:
    """
    JSON ファイルからローカルの日記コレクションを読み込み

    Args:
        path: DiaryItem[] 形式の JSON ファイル（None の場合は空）

    Returns:
        エントリのリスト。ファイルがない場合は空リスト

    Raises:
        DiaryDecodeError: ファイルの内容が不正な場合
    """
    if not path:
        return []
    if not os.path.exists(path):
        logger.warning(f"[diary] Data file not found, start with empty diary: {path}")
        return []

    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DiaryDecodeError(f"invalid diary data file {path}: {e}")

    entries = decode_entries(payload)
    logger.info(f"[diary] Loaded {len(entries)} entries from {path}")
    return entries


def _sorted_by_date(entries: Iterable[DiaryEntry]) -> List[DiaryEntry]:
    # 安定ソートのため同じ日時は元の順序を保つ
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def _apply_limit(entries: List[DiaryEntry], limit: Optional[int]) -> List[DiaryEntry]:
    if limit and limit > 0:
        return entries[:limit]
    return entries


class DiaryStore:
    """メモリ内の日記コレクションに対するクエリ"""

    def __init__(self, entries: Iterable[DiaryEntry] = (), remote: Optional[RemoteDiarySource] = None):
        """
        Args:
            entries: ローカルの日記コレクション（起動時に固定）
            remote: リモート日記 API（None の場合は常にローカルを使う）
        """
        self._entries = tuple(entries)
        self._remote = remote

    @property
    def entries(self) -> Sequence[DiaryEntry]:
        return self._entries

    def _resolve(self, collection: Optional[Iterable[DiaryEntry]]) -> Sequence[DiaryEntry]:
        if collection is None:
            return self._entries
        return tuple(collection)

    def get_stats(self, collection: Optional[Iterable[DiaryEntry]] = None) -> DiaryStats:
        """日記の統計データを取得"""
        entries = self._resolve(collection)
        return DiaryStats.from_counts(
            total=len(entries),
            has_images=sum(1 for entry in entries if entry.has_images),
            has_location=sum(1 for entry in entries if entry.location),
            has_mood=sum(1 for entry in entries if entry.mood),
        )

    def list_entries(self, collection: Optional[Iterable[DiaryEntry]] = None, limit: Optional[int] = None) -> List[DiaryEntry]:
        """
        日記一覧を取得（日時の新しい順）

        Args:
            collection: 対象のエントリ（省略時はローカル）
            limit: 最大件数（None・0・負数の場合は全件）

        Returns:
            並び替えたエントリのリスト
        """
        return _apply_limit(_sorted_by_date(self._resolve(collection)), limit)

    def get_latest(self, collection: Optional[Iterable[DiaryEntry]] = None) -> Optional[DiaryEntry]:
        """最新の日記を取得"""
        latest = self.list_entries(collection, limit=1)
        return latest[0] if latest else None

    def get_by_id(self, entry_id: int, collection: Optional[Iterable[DiaryEntry]] = None) -> Optional[DiaryEntry]:
        """ID で日記を取得"""
        for entry in self._resolve(collection):
            if entry.id == entry_id:
                return entry
        return None

    def get_with_images(self, collection: Optional[Iterable[DiaryEntry]] = None) -> List[DiaryEntry]:
        """画像付きの日記を取得（元の順序のまま）"""
        return [entry for entry in self._resolve(collection) if entry.has_images]

    def get_by_tag(self, tag: str, collection: Optional[Iterable[DiaryEntry]] = None) -> List[DiaryEntry]:
        """タグで日記を絞り込み（日時の新しい順）"""
        matched = [entry for entry in self._resolve(collection) if entry.tags and tag in entry.tags]
        return _sorted_by_date(matched)

    def get_all_tags(self, collection: Optional[Iterable[DiaryEntry]] = None) -> List[str]:
        """すべてのタグを取得（重複なし・昇順）"""
        tags = set()
        for entry in self._resolve(collection):
            if entry.tags:
                tags.update(entry.tags)
        return sorted(tags)

    async def _fetch_remote(self) -> FetchResult:
        if self._remote is None:
            return FetchResult.failure("remote diary API is not configured")
        try:
            return await self._remote.fetch()
        except Exception as e:
            return FetchResult.failure(f"{type(e).__name__}: {e}")

    async def list_entries_remote(self, limit: Optional[int] = None) -> List[DiaryEntry]:
        """
        リモート API を優先して日記一覧を取得し、失敗時はローカルデータに戻す

        Args:
            limit: 最大件数

        Returns:
            並び替えたエントリのリスト（例外は投げない）
        """
        result = await self._fetch_remote()
        return result.or_else(
            fallback=lambda: self.list_entries(limit=limit),
            on_success=lambda entries: self.list_entries(entries, limit=limit),
        )

    async def get_stats_remote(self) -> DiaryStats:
        """リモート API を優先して統計を取得し、失敗時はローカルの統計を返す"""
        try:
            entries = await self.list_entries_remote()
            return self.get_stats(entries)
        except Exception as e:
            logger.warning(f"[diary] Remote stats failed, use local stats: {e}")
            return self.get_stats()
