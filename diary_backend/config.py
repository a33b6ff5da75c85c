"""
環境変数からの設定読み込み
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv

# 許可するオリジンのデフォルト（ローカル開発用）
DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:4321",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:4321",
    "http://127.0.0.1:5173",
]


@dataclass(frozen=True)
class Settings:
    """アプリケーション設定"""
    remote_api: str
    remote_timeout: float
    data_file: Optional[str]
    allowed_origins: List[str]
    log_level: str


def _load_env_file() -> None:
    # .env ファイルから環境変数を読み込み（ローカル開発時）
    env_path = Path(__file__).parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def get_settings() -> Settings:
    """
    環境変数から設定を取得

    Returns:
        Settings
    """
    _load_env_file()

    origins = os.environ.get("ALLOWED_ORIGINS", "")
    allowed_origins = [origin.strip() for origin in origins.split(",") if origin.strip()]

    try:
        remote_timeout = float(os.environ.get("DIARY_REMOTE_TIMEOUT", "10"))
    except ValueError:
        remote_timeout = 10.0

    return Settings(
        remote_api=os.environ.get("DIARY_REMOTE_API", "").strip(),
        remote_timeout=remote_timeout,
        data_file=os.environ.get("DIARY_DATA_FILE") or None,
        allowed_origins=allowed_origins or list(DEFAULT_ALLOWED_ORIGINS),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
