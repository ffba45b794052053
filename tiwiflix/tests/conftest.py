"""Shared fixtures for the TiwiFlix test suite."""

import pytest
import pytest_asyncio
from aiohttp import web

from tiwiflix.core.cells import Address, begin_cell
from tiwiflix.core.types import RoyaltyParams


@pytest.fixture
def owner() -> Address:
    return Address((0, bytes(range(32))))


@pytest.fixture
def other() -> Address:
    return Address((0, bytes(range(32, 64))))


@pytest.fixture
def collection() -> Address:
    return Address((0, b"\xc0" * 32))


@pytest.fixture
def item_code():
    # Stand-in contract code; only its hash matters for address derivation
    return begin_cell().store_uint(0xFF00F4A413F4BCF2, 64).end_cell()


@pytest.fixture
def royalty(owner) -> RoyaltyParams:
    return RoyaltyParams(50, 1000, owner)


# ==============================================================================
# FAKE TONCENTER
# ==============================================================================
class FakeToncenter:
    """
    Canned runGetMethod responses keyed by getter name.

    A reply registered with an address only answers calls on that contract;
    one without answers every other call. Queued replies are served in
    order, starting over after the last one.
    """

    def __init__(self):
        self.responses = {}
        self.requests = []

    @staticmethod
    def _key(method, address):
        return method, address.to_str() if address is not None else None

    def reply(self, method, stack, exit_code=0, address=None):
        self.responses[self._key(method, address)] = [
            (200, {"ok": True, "result": {"exit_code": exit_code, "stack": stack}}),
        ]

    def reply_each(self, method, stacks, address=None):
        self.responses[self._key(method, address)] = [
            (200, {"ok": True, "result": {"exit_code": 0, "stack": stack}}) for stack in stacks
        ]

    def fail(self, method, status, error, address=None):
        self.responses[self._key(method, address)] = [
            (status, {"ok": False, "error": error, "code": status}),
        ]

    async def handle(self, request):
        body = await request.json()
        self.requests.append((dict(request.headers), body))
        queue = self.responses.get(
            (body["method"], body["address"]),
            self.responses.get((body["method"], None), [(404, {"ok": False, "error": "no such method"})]),
        )
        status, payload = queue[0]
        queue.append(queue.pop(0))
        return web.json_response(payload, status=status)


@pytest_asyncio.fixture
async def toncenter():
    """(FakeToncenter, endpoint URL) served on a local port."""
    fake = FakeToncenter()
    app = web.Application()
    app.router.add_post("/api/v2/runGetMethod", fake.handle)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield fake, f"http://{host}:{port}/api/v2"
    finally:
        await runner.cleanup()
