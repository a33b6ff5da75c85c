import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from diary_backend.models import DiaryDecodeError, DiaryEntry
from diary_backend.remote import FetchResult, RemoteDiarySource, decode_entries
from diary_backend.store import DiaryStore


def _with_server(handler, use, path="/diary.json"):
    """ローカルの aiohttp サーバーを立てて use(url) を実行する"""
    async def run():
        app = web.Application()
        app.router.add_get("/diary.json", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            return await use(str(server.make_url(path)))
        finally:
            await server.close()

    return asyncio.run(run())


def _fetch_from(handler, path="/diary.json", timeout=5):
    return _with_server(handler, lambda url: RemoteDiarySource(url, timeout=timeout).fetch(), path=path)


def test_fetch_success():
    async def handler(request):
        return web.json_response([
            {"id": 1, "content": "a", "date": "2024-01-01", "images": ["x.jpg"]},
            {"id": 2, "content": "b", "date": "2024-02-01"},
        ])

    result = _fetch_from(handler)

    assert result.ok
    assert [entry.id for entry in result.entries] == [1, 2]
    assert result.entries[0].images == ("x.jpg",)


def test_fetch_non_success_status():
    async def handler(request):
        return web.Response(status=500, text="error")

    result = _fetch_from(handler)

    assert not result.ok
    assert result.error == "HTTP 500"


def test_fetch_not_found():
    async def handler(request):
        return web.json_response([])

    result = _fetch_from(handler, path="/missing.json")

    assert result.error == "HTTP 404"


def test_fetch_invalid_json():
    async def handler(request):
        return web.Response(text="<html>not json</html>", content_type="text/html")

    result = _fetch_from(handler)

    assert not result.ok
    assert "JSONDecodeError" in result.error


def test_fetch_payload_not_a_list():
    async def handler(request):
        return web.json_response({"entries": []})

    result = _fetch_from(handler)

    assert not result.ok
    assert "DiaryDecodeError" in result.error


def test_fetch_malformed_record():
    async def handler(request):
        return web.json_response([{"id": 1, "date": "2024-01-01"}])

    result = _fetch_from(handler)

    assert not result.ok
    assert "content" in result.error


def test_fetch_empty_url_makes_no_request():
    result = asyncio.run(RemoteDiarySource("").fetch())

    assert not result.ok
    assert "not configured" in result.error


def test_fetch_invalid_url_is_a_failure():
    result = asyncio.run(RemoteDiarySource("not a url").fetch())

    assert not result.ok


def test_or_else_on_success_transforms_entries():
    result = FetchResult.success([])

    assert result.or_else(fallback=lambda: ["local"], on_success=lambda entries: ["remote"]) == ["remote"]


def test_or_else_on_failure_uses_fallback(caplog):
    result = FetchResult.failure("HTTP 502")

    with caplog.at_level("WARNING"):
        value = result.or_else(fallback=lambda: ["local"], on_success=lambda entries: ["remote"])

    assert value == ["local"]
    assert "HTTP 502" in caplog.text


def test_decode_entries_rejects_non_list():
    with pytest.raises(DiaryDecodeError):
        decode_entries({"id": 1})


def test_fetch_infinite_id_is_a_failure():
    async def handler(request):
        return web.Response(text='[{"id": Infinity, "content": "c", "date": "2024-01-01"}]',
                            content_type="application/json")

    result = _fetch_from(handler)

    assert not result.ok
    assert "DiaryDecodeError" in result.error


def _slow_handler():
    async def handler(request):
        await asyncio.sleep(2)
        return web.json_response([])

    return handler


def test_fetch_timeout_is_a_failure():
    result = _fetch_from(_slow_handler(), timeout=0.1)

    assert not result.ok


def test_list_entries_remote_falls_back_on_timeout():
    local = [
        DiaryEntry(id=1, content="a", date="2024-01-01"),
        DiaryEntry(id=2, content="b", date="2024-02-01"),
    ]

    async def use(url):
        store = DiaryStore(local, remote=RemoteDiarySource(url, timeout=0.1))
        return await store.list_entries_remote()

    result = _with_server(_slow_handler(), use)

    assert [entry.id for entry in result] == [2, 1]
