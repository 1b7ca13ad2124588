import httpx
import pytest


@pytest.fixture
async def mock_client():
    """Build AsyncClients served by an in-process handler."""
    clients = []

    def make(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield make

    for client in clients:
        await client.aclose()
