# File: tests/conftest.py
import asyncio
import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from adrules.config import SyncConfig
from adrules.logger import configure

#: seconds the slow handler sleeps; longer than ``fast_config.timeout``
SLOW_SLEEP: float = 2.0

RULES_A = b"||ads.example.com^\n||tracker.example.com^\n"
RULES_C = b"! comment\n||c.example.org^\n"


async def serve_app(app: web.Application, port: int, backlog: int = 1024) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port, backlog=backlog)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def rules_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """Server with good, broken, empty and slow rule lists."""
    app = web.Application()

    async def handle_a(_):
        return web.Response(body=RULES_A, content_type="text/plain")

    async def handle_c(_):
        return web.Response(body=RULES_C, content_type="text/plain")

    async def handle_broken(_):
        return web.Response(status=500, text="boom")

    async def handle_empty(_):
        return web.Response(body=b"", content_type="text/plain")

    async def handle_slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(body=b"||slow.example^\n", content_type="text/plain")

    app.router.add_get("/a.txt", handle_a)
    app.router.add_get("/c.txt", handle_c)
    app.router.add_get("/broken.txt", handle_broken)
    app.router.add_get("/empty.txt", handle_empty)
    app.router.add_get("/slow.txt", handle_slow)

    async for url in serve_app(app, unused_tcp_port):
        yield url


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI tests bind the logger to CliRunner streams; rebind it afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def fake_compiler(tmp_path) -> list[str]:
    """Compiler command that copies its input to its output unchanged."""
    script = tmp_path / "fake_compiler.py"
    script.write_text(
        "import shutil, sys\n"
        "args = sys.argv[1:]\n"
        "shutil.copyfile(args[args.index('-i') + 1], args[args.index('-o') + 1])\n",
        encoding="utf-8",
    )
    return [sys.executable, str(script)]


@pytest.fixture()
def fast_config(tmp_path: Path, fake_compiler) -> SyncConfig:
    """SyncConfig writing into *tmp_path* with a short timeout."""
    return SyncConfig(
        rules_file=tmp_path / "rules.txt",
        output_dir=tmp_path / "rules",
        publish_dir=tmp_path / "publish",
        timeout=0.5,
        concurrency=4,
        user_agent="TestAgent/1.0",
        compiler=fake_compiler,
        homepage="https://example.com/adrules",
    )
