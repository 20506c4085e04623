"""Tests for middleware and exception handlers."""

import pytest
from httpx import AsyncClient


class TestSecurityHeadersMiddleware:
    """Tests for security headers middleware."""

    @pytest.mark.asyncio
    async def test_security_headers_present(self, client: AsyncClient) -> None:
        """Test that security headers are present in responses."""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers.get("X-Content-Type-Options") == "nosniff"
        assert response.headers.get("X-Frame-Options") == "DENY"
        assert (
            response.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"
        )
        assert "Content-Security-Policy" in response.headers

    @pytest.mark.asyncio
    async def test_csp_header_content(self, client: AsyncClient) -> None:
        """Test Content-Security-Policy header content."""
        response = await client.get("/")

        csp = response.headers.get("Content-Security-Policy", "")
        assert "default-src 'self'" in csp
        assert "form-action 'self'" in csp
        assert "frame-ancestors 'none'" in csp

    @pytest.mark.asyncio
    async def test_headers_on_redirect(self, client: AsyncClient) -> None:
        """Test the save redirect carries the same headers."""
        response = await client.post("/save", data={"item": "x"})

        assert response.status_code == 303
        assert response.headers.get("X-Frame-Options") == "DENY"


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    @pytest.mark.asyncio
    async def test_correlation_id_in_response(self, client: AsyncClient) -> None:
        """Test that correlation ID is returned in response headers."""
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert len(response.headers["X-Correlation-ID"]) > 0

    @pytest.mark.asyncio
    async def test_correlation_id_from_request(self, client: AsyncClient) -> None:
        """Test that provided correlation ID is preserved."""
        custom_id = "test-correlation-id-12345"
        response = await client.get(
            "/health/live",
            headers={"X-Correlation-ID": custom_id},
        )

        assert response.headers.get("X-Correlation-ID") == custom_id

    @pytest.mark.asyncio
    async def test_unsafe_correlation_id_replaced(self, client: AsyncClient) -> None:
        """Test that a correlation ID with unsafe characters is not echoed."""
        unsafe_id = "not valid; drop"
        response = await client.get(
            "/health/live",
            headers={"X-Correlation-ID": unsafe_id},
        )

        correlation_id = response.headers["X-Correlation-ID"]
        assert correlation_id != unsafe_id
        assert len(correlation_id) == 36


class TestRequestLoggingMiddleware:
    """Tests for request logging middleware."""

    @pytest.mark.asyncio
    async def test_process_time_header(self, client: AsyncClient) -> None:
        """Test that X-Process-Time header is present."""
        response = await client.get("/health/live")

        process_time_str = response.headers["X-Process-Time"]
        assert process_time_str.endswith("ms")
        assert float(process_time_str.removesuffix("ms")) >= 0

    @pytest.mark.asyncio
    async def test_request_is_logged(
        self,
        client: AsyncClient,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that completed requests are logged with method and path."""
        with caplog.at_level("INFO", logger="todo.requests"):
            await client.get("/")

        assert any(
            "method=GET" in record.getMessage() and "path=/" in record.getMessage()
            for record in caplog.records
        )


class TestRequestSizeLimitMiddleware:
    """Tests for request size limit middleware."""

    @pytest.mark.asyncio
    async def test_large_request_rejected(self, client: AsyncClient) -> None:
        """Test that requests exceeding size limit are rejected."""
        response = await client.post(
            "/save",
            data={"item": "x" * (11 * 1024 * 1024)},
        )

        assert response.status_code == 413
        assert response.json()["detail"] == "Request body too large"

    @pytest.mark.asyncio
    async def test_normal_request_allowed(self, client: AsyncClient) -> None:
        """Test that normal-sized requests are allowed."""
        response = await client.post("/save", data={"item": "a normal item"})

        assert response.status_code == 303

    @pytest.mark.asyncio
    async def test_invalid_content_length_rejected(self, client: AsyncClient) -> None:
        """Test that a non-numeric Content-Length is rejected."""
        response = await client.post(
            "/save",
            content=b"item=x",
            headers={
                "Content-Length": "abc",
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Content-Length header"


class TestValidationErrorHandler:
    """Tests for the request validation error handler."""

    @pytest.mark.asyncio
    async def test_uploaded_file_as_item(self, client: AsyncClient) -> None:
        """Test a file sent in place of the item field answers 422, not 500."""
        response = await client.post(
            "/save",
            files={"item": ("notes.txt", b"buy milk", "text/plain")},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert "correlation_id" in data
        assert data["detail"][0]["loc"] == ["body", "item"]
        assert isinstance(data["detail"][0]["input"], str)
        assert "X-Correlation-ID" in response.headers

    @pytest.mark.asyncio
    async def test_uploaded_file_not_saved(self, client: AsyncClient) -> None:
        """Test a rejected save leaves the list untouched."""
        await client.post(
            "/save",
            files={"item": ("notes.txt", b"buy milk", "text/plain")},
        )

        response = await client.get("/")
        assert "<li>" not in response.text
