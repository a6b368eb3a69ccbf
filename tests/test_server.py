"""
Blog API — Server Lifecycle Tests
===================================

What:  run_server / close_server against a real socket and SQLite file.

What we test:
    ✅ run_server on port 0 serves HTTP until close_server
    ✅ An unusable database aborts startup before anything is bound
    ✅ An occupied port aborts startup and disposes the database
"""

import socket

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from blogapi.database import Database
from blogapi.main import close_server, run_server


@pytest.mark.asyncio
async def test_serves_until_closed(database_url):
    handle = await run_server(database_url, port=0, host="127.0.0.1")
    try:
        assert handle.port > 0
        assert handle.database.is_connected

        async with httpx.AsyncClient(base_url=handle.base_url) as client:
            created = await client.post(
                "/blogs", json={"title": "T", "author": {"lastName": "Doe"}, "content": "C"}
            )
            listed = await client.get("/blogs")
    finally:
        await close_server(handle)

    assert created.status_code == 201
    assert listed.json() == {"blogs": [created.json()]}
    assert not handle.database.is_connected
    assert handle.task.done()

    async with httpx.AsyncClient(base_url=handle.base_url) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get("/blogs")


@pytest.mark.asyncio
async def test_unreachable_database_aborts_startup(tmp_path):
    missing = tmp_path / "no-such-dir" / "blogs.db"

    with pytest.raises(OperationalError):
        await run_server(f"sqlite+aiosqlite:///{missing}", port=0, host="127.0.0.1")


@pytest.mark.asyncio
async def test_occupied_port_releases_database(database_url, monkeypatch):
    disposed = []
    original_dispose = Database.dispose

    async def spy_dispose(self):
        disposed.append(self)
        await original_dispose(self)

    monkeypatch.setattr(Database, "dispose", spy_dispose)

    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("127.0.0.1", 0))
    blocker.listen(1)
    try:
        with pytest.raises(OSError):
            await run_server(database_url, port=blocker.getsockname()[1], host="127.0.0.1")
    finally:
        blocker.close()

    assert len(disposed) == 1
    assert not disposed[0].is_connected
