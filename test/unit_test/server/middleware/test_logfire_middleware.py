"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Duration measurement and the X-Process-Time header
- Slow request detection
- Error handling
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from sws_blog.server.middleware.logfire_middleware import SLOW_REQUEST_MS, LogfireMiddleware

MODULE = "sws_blog.server.middleware.logfire_middleware"


def _request(method: str = "GET", path: str = "/api/v1/posts") -> AsyncMock:
    mock_request = AsyncMock(spec=Request)
    mock_request.method = method
    mock_request.url.path = path
    mock_request.state = MagicMock()
    return mock_request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_middleware_processes_successful_request(self):
        mock_response = Response(content="ok", status_code=200)

        async def mock_call_next(request):
            return mock_response

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_request(), mock_call_next)

            assert response.status_code == 200
            mock_log.assert_called_once()
            call_args = mock_log.call_args
            assert call_args[1]["method"] == "GET"
            assert call_args[1]["path"] == "/api/v1/posts"
            assert call_args[1]["status_code"] == 200
            assert call_args[1]["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_middleware_adds_process_time_header(self):
        async def mock_call_next(request):
            return Response(content="ok", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(_request("POST", "/api/v1/contact"), mock_call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_middleware_stores_start_time(self):
        mock_request = _request()

        async def mock_call_next(request):
            return Response(status_code=204)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"):
            await middleware.dispatch(mock_request, mock_call_next)

        assert mock_request.state.start_time is not None

    @pytest.mark.asyncio
    async def test_middleware_detects_slow_requests(self):
        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger:
            with patch(f"{MODULE}.time.perf_counter", side_effect=[0.0, (SLOW_REQUEST_MS + 500) / 1000]):
                await middleware.dispatch(_request(path="/api/v1/search"), mock_call_next)

            mock_logger.warning.assert_called_once()
            assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_fast_requests_are_not_flagged(self):
        async def mock_call_next(request):
            return Response(status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger:
            with patch(f"{MODULE}.time.perf_counter", side_effect=[0.0, 0.01]):
                await middleware.dispatch(_request(), mock_call_next)

            mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_middleware_handles_request_exception(self):
        async def mock_call_next(request):
            raise ValueError("Test error")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(ValueError):
                await middleware.dispatch(_request(path="/api/v1/error"), mock_call_next)

            mock_logger.error.assert_called_once()
            mock_log.assert_called_once()
            assert mock_log.call_args[1]["status_code"] == 500
