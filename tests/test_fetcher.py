# File: tests/test_fetcher.py
from __future__ import annotations

import pytest
from aiohttp import ClientPayloadError, web

from adrules.errors import ErrorKind
from adrules.fetcher import Failure, Fetcher, Success, WorkItem

from conftest import RULES_A, serve_app


async def fetch_one(config, url: str, position: int = 0):
    async with Fetcher(config) as fetcher:
        return await fetcher.fetch(WorkItem(position, url))


@pytest.mark.asyncio()
async def test_fetch_success(fast_config, rules_server: str):
    outcome = await fetch_one(fast_config, f"{rules_server}/a.txt", position=3)
    assert isinstance(outcome, Success)
    assert outcome.ok
    assert outcome.content == RULES_A
    assert outcome.position == 3
    assert outcome.url == f"{rules_server}/a.txt"


@pytest.mark.asyncio()
async def test_fetch_accepts_plain_string(fast_config, rules_server: str):
    async with Fetcher(fast_config) as fetcher:
        outcome = await fetcher.fetch(f"{rules_server}/a.txt")
    assert isinstance(outcome, Success)
    assert outcome.position == 0


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "path,kind",
    [
        ("/broken.txt", ErrorKind.BAD_STATUS),
        ("/missing.txt", ErrorKind.BAD_STATUS),
        ("/empty.txt", ErrorKind.EMPTY_BODY),
    ],
)
async def test_fetch_failures(fast_config, rules_server: str, path, kind):
    outcome = await fetch_one(fast_config, f"{rules_server}{path}")
    assert isinstance(outcome, Failure)
    assert not outcome.ok
    assert outcome.kind is kind


@pytest.mark.asyncio()
async def test_bad_status_message_has_code(fast_config, rules_server: str):
    outcome = await fetch_one(fast_config, f"{rules_server}/broken.txt")
    assert "500" in outcome.message


@pytest.mark.asyncio()
async def test_timeout_is_transport_error(fast_config, rules_server: str):
    outcome = await fetch_one(fast_config, f"{rules_server}/slow.txt")
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.TRANSPORT
    assert "timed out" in outcome.message


@pytest.mark.asyncio()
async def test_connection_refused_is_transport_error(fast_config, unused_tcp_port: int):
    outcome = await fetch_one(fast_config, f"http://127.0.0.1:{unused_tcp_port}/rules.txt")
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.TRANSPORT


@pytest.mark.asyncio()
@pytest.mark.parametrize("url", ["not a url", "ftp://example.com/rules.txt", "http://", "/relative/path"])
async def test_malformed_url_is_request_construction_error(fast_config, url):
    outcome = await fetch_one(fast_config, url)
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.REQUEST_CONSTRUCTION
    assert outcome.url == url


class _BrokenBodyResponse:
    status = 200
    reason = "OK"

    async def read(self) -> bytes:
        raise ClientPayloadError("Response payload is not completed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class _FakeSession:
    closed = False

    def __init__(self) -> None:
        self.requested = []

    def get(self, url, **kwargs):
        self.requested.append(str(url))
        return _BrokenBodyResponse()


@pytest.mark.asyncio()
async def test_body_read_error(fast_config):
    session = _FakeSession()
    async with Fetcher(fast_config, session=session) as fetcher:
        outcome = await fetcher.fetch(WorkItem(1, "https://example.com/list.txt"))
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.BODY_READ
    assert session.requested == ["https://example.com/list.txt"]


@pytest.mark.asyncio()
async def test_sends_user_agent(fast_config, unused_tcp_port: int):
    seen = {}

    async def handler(request):
        seen["ua"] = request.headers.get("User-Agent")
        return web.Response(text="||x^")

    app = web.Application()
    app.router.add_get("/ua.txt", handler)
    async for base in serve_app(app, unused_tcp_port):
        outcome = await fetch_one(fast_config, f"{base}/ua.txt")

    assert isinstance(outcome, Success)
    assert seen["ua"] == "TestAgent/1.0"
