import pytest


@pytest.fixture
def anyio_backend():
    # The code under test is asyncio-based (asyncio.Lock, asyncio.gather)
    return "asyncio"
