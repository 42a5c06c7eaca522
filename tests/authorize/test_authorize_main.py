import pytest

import authorize.main as authorize_main


@pytest.mark.asyncio
async def test_health_check_endpoint():
    result = await authorize_main.health_check()
    assert result == {"status": "ok"}


@pytest.mark.asyncio
async def test_lifespan_initializes_and_closes_session_manager(monkeypatch):
    calls = []

    class StubManager:
        def init(self, url):
            calls.append(("init", url))

        async def create_all(self, base):
            calls.append(("create_all", base))

        async def close(self):
            calls.append(("close",))

    monkeypatch.setattr(authorize_main, "session_manager", StubManager())
    monkeypatch.setattr(authorize_main.settings, "LOG_JSON", False)
    monkeypatch.setattr(authorize_main.settings, "DB_URL", "sqlite+aiosqlite://")
    monkeypatch.setattr(authorize_main.settings, "DB_CREATE_TABLES", True)

    async with authorize_main.lifespan(authorize_main.app):
        assert calls == [
            ("init", "sqlite+aiosqlite://"),
            ("create_all", authorize_main.Base),
        ]

    assert calls[-1] == ("close",)


@pytest.mark.asyncio
async def test_unhandled_exception_handler_returns_500():
    class DummyRequest:
        method = "GET"

        class url:
            path = "/authorize"

    try:
        raise ValueError("boom")
    except ValueError as ex:
        res = await authorize_main.log_unhandled_exception(DummyRequest(), ex)

    assert res.status_code == 500
    assert b"Internal Server Error: boom" in res.body
