import asyncio
import socket

import httpx
import pytest

import run
from user_service_api.app.transport.client import MessageClient


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def wait_for_port(port, timeout=10.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        try:
            _, writer = await asyncio.open_connection("127.0.0.1", port)
        except OSError:
            if loop.time() > deadline:
                raise
            await asyncio.sleep(0.05)
            continue
        writer.close()
        await writer.wait_closed()
        return


def test_main_serves_both_transports_and_stops_on_cancel(settings):
    settings.http_host = "127.0.0.1"
    settings.http_port = free_port()
    settings.rpc_port = free_port()

    async def scenario():
        task = asyncio.create_task(run.main(settings))
        await wait_for_port(settings.http_port)
        await wait_for_port(settings.rpc_port)

        async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{settings.http_port}") as http:
            created = await http.post("/", json={"name": "Alice"})
        async with MessageClient("127.0.0.1", settings.rpc_port) as client:
            users = await client.send({"cmd": "get_users"}, timeout=5)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(OSError):
            await asyncio.open_connection("127.0.0.1", settings.rpc_port)
        return created, users

    created, users = asyncio.run(scenario())

    assert created.status_code == 201
    assert users == [{"id": 1, "name": "Alice", "email": None, "phone": None}]
