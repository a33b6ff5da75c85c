"""
データモデル定義 - dataclassesを使用
"""
from dataclasses import dataclass, asdict
from typing import Optional, Tuple, Any
from datetime import datetime, timezone
import math


class DiaryDecodeError(ValueError):
    """日記データのデコードエラー"""
    pass


# fromisoformat で読めない日付の追加フォーマット
_EXTRA_DATE_FORMATS = [
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y.%m.%d",
    "%Y.%m.%d %H:%M",
    "%Y.%m.%d %H:%M:%S",
]


def parse_timestamp(value: Any) -> float:
    """
    日付文字列を UNIX タイムスタンプに変換

    タイムゾーンのない日時は UTC として扱う。
    解析できない値は -inf（最も古い扱い）を返す。

    Args:
        value: 日付文字列（YYYY-MM-DD, ISO 8601, YYYY/MM/DD など）

    Returns:
        秒単位のタイムスタンプ
    """
    if not isinstance(value, str) or not value.strip():
        return -math.inf

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _EXTRA_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return -math.inf
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


def _optional_strings(data: dict, key: str) -> Optional[Tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise DiaryDecodeError(f"'{key}' must be a list of strings: {value!r}")
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class DiaryEntry:
    """日記エントリモデル"""
    id: int
    content: str
    date: str
    images: Optional[Tuple[str, ...]] = None
    location: Optional[str] = None
    mood: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "DiaryEntry":
        """
        JSON の辞書からエントリを生成

        Args:
            data: DiaryItem 形式の辞書

        Returns:
            DiaryEntry

        Raises:
            DiaryDecodeError: 必須フィールドが欠けている、または型が不正な場合
        """
        if not isinstance(data, dict):
            raise DiaryDecodeError(f"diary record must be an object: {data!r}")

        for key in ("id", "content", "date"):
            if data.get(key) is None:
                raise DiaryDecodeError(f"diary record is missing '{key}'")

        raw_id = data["id"]
        if isinstance(raw_id, bool) or (isinstance(raw_id, float) and not raw_id.is_integer()):
            raise DiaryDecodeError(f"'id' must be an integer: {raw_id!r}")
        try:
            entry_id = int(raw_id)
        except (TypeError, ValueError, OverflowError):
            raise DiaryDecodeError(f"'id' must be an integer: {raw_id!r}")

        return cls(
            id=entry_id,
            content=str(data["content"]),
            date=str(data["date"]),
            images=_optional_strings(data, "images"),
            location=_optional_str(data, "location"),
            mood=_optional_str(data, "mood"),
            tags=_optional_strings(data, "tags"),
            title=_optional_str(data, "title"),
        )

    @property
    def timestamp(self) -> float:
        """並び替え用のタイムスタンプ"""
        return parse_timestamp(self.date)

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    def to_dict(self):
        """辞書に変換（値のない任意フィールドは省略）"""
        data = asdict(self)
        for key in ("images", "tags"):
            if data[key] is not None:
                data[key] = list(data[key])
        return {key: value for key, value in data.items() if value is not None}


def _percentage(count: int, total: int) -> int:
    # 0.5 は切り上げ（Math.round と同じ）
    if not total:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


@dataclass(frozen=True)
class DiaryStats:
    """日記統計モデル"""
    total: int
    has_images: int
    has_location: int
    has_mood: int
    image_percentage: int
    location_percentage: int
    mood_percentage: int

    @classmethod
    def from_counts(cls, total: int, has_images: int, has_location: int, has_mood: int) -> "DiaryStats":
        return cls(
            total=total,
            has_images=has_images,
            has_location=has_location,
            has_mood=has_mood,
            image_percentage=_percentage(has_images, total),
            location_percentage=_percentage(has_location, total),
            mood_percentage=_percentage(has_mood, total),
        )

    def to_dict(self):
        """フロントエンド向けのキー名で辞書に変換"""
        return {
            "total": self.total,
            "hasImages": self.has_images,
            "hasLocation": self.has_location,
            "hasMood": self.has_mood,
            "imagePercentage": self.image_percentage,
            "locationPercentage": self.location_percentage,
            "moodPercentage": self.mood_percentage,
        }
