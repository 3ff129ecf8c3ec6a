from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import pytest

from bolta.backoff import FixedBackoff
from bolta.http import AsyncBaseTransport, BaseTransport, HttpMethod, HttpRequest
from bolta.retry import RangeStatusCodeMatcher, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def request_get() -> HttpRequest:
    """Create a GET request for testing."""
    return HttpRequest(HttpMethod.GET, "https://xapi.bolta.io/v1/customers/ck_123")


@pytest.fixture
def server_error_policy() -> RetryPolicy:
    """Create a policy retrying 5xx responses up to 3 attempts."""
    return RetryPolicy(
        max_attempts=3,
        backoff=FixedBackoff(100),
        status_matcher=RangeStatusCodeMatcher(500, 599),
    )


@pytest.fixture
def mock_transport() -> Mock:
    """Create a mock blocking transport for testing."""
    return Mock(spec=BaseTransport)


@pytest.fixture
def mock_async_transport() -> Mock:
    """Create a mock non-blocking transport for testing."""
    return Mock(spec=AsyncBaseTransport, send=AsyncMock(), aclose=AsyncMock())
