"""
FastAPI アプリケーションのメインエントリポイント（日記の読み取り API）
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Optional

from .config import Settings, configure_logging, get_settings
from .remote import RemoteDiarySource
from .store import DiaryStore, load_entries


def create_store(settings: Settings) -> DiaryStore:
    """設定からストアを生成"""
    remote = RemoteDiarySource(settings.remote_api, timeout=settings.remote_timeout)
    return DiaryStore(load_entries(settings.data_file), remote=remote)


def create_app(settings: Optional[Settings] = None, store: Optional[DiaryStore] = None) -> FastAPI:
    """
    アプリケーションを生成

    Args:
        settings: 設定（省略時は環境変数から取得）
        store: ストア（省略時は設定から生成）

    Returns:
        FastAPI アプリケーション
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store or create_store(settings)
    allowed_origins = settings.allowed_origins

    app = FastAPI(title="Diary API", version="1.0.0")

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        """
        手動 CORS ミドルウェア
        すべてのレスポンス（エラーを含む）に CORS ヘッダーを追加
        """
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            # プリフライトリクエスト
            if origin in allowed_origins:
                return JSONResponse(
                    content={},
                    status_code=200,
                    headers={
                        "Access-Control-Allow-Origin": origin,
                        "Access-Control-Allow-Methods": "GET, OPTIONS",
                        "Access-Control-Allow-Headers": "Content-Type",
                        "Access-Control-Max-Age": "3600",
                    },
                )
            return JSONResponse(content={"error": "Forbidden"}, status_code=403)

        response = await call_next(request)

        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"

        return response

    @app.get("/health")
    def health_check():
        """ヘルスチェックエンドポイント"""
        return {"status": "ok", "timestamp": datetime.now().isoformat()}

    @app.get("/")
    def root():
        """ルートエンドポイント"""
        return {"message": "Diary API", "version": "1.0.0"}

    @app.get("/diary")
    def list_diary(limit: Optional[int] = None):
        """日記一覧（新しい順）"""
        return {"entries": [entry.to_dict() for entry in store.list_entries(limit=limit)]}

    @app.get("/diary/latest")
    def get_latest_diary():
        """最新の日記（ない場合は null）"""
        entry = store.get_latest()
        return {"entry": entry.to_dict() if entry else None}

    @app.get("/diary/stats")
    def get_diary_stats():
        """日記の統計"""
        return store.get_stats().to_dict()

    @app.get("/diary/images")
    def get_diary_with_images():
        """画像付きの日記"""
        return {"entries": [entry.to_dict() for entry in store.get_with_images()]}

    @app.get("/diary/tags")
    def get_all_tags():
        """すべてのタグ"""
        return {"tags": store.get_all_tags()}

    @app.get("/diary/tags/{tag}")
    def get_diary_by_tag(tag: str):
        """タグで絞り込んだ日記"""
        return {"tag": tag, "entries": [entry.to_dict() for entry in store.get_by_tag(tag)]}

    @app.get("/diary/remote")
    async def list_diary_remote(limit: Optional[int] = None):
        """
        リモート API を優先した日記一覧

        - リモート取得に失敗した場合はローカルデータを返す
        """
        entries = await store.list_entries_remote(limit)
        return {"entries": [entry.to_dict() for entry in entries]}

    @app.get("/diary/remote/stats")
    async def get_diary_stats_remote():
        """リモート API を優先した統計"""
        stats = await store.get_stats_remote()
        return stats.to_dict()

    @app.get("/diary/{entry_id}")
    def get_diary_entry(entry_id: int):
        """ID で日記を取得"""
        entry = store.get_by_id(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        return entry.to_dict()

    return app


app = create_app()
