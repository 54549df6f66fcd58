"""
Tests for AiohttpTransport against a local aiohttp test server.
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer

from risk_aggregation.models import RequestContext
from risk_aggregation.providers import (
    AiohttpTransport,
    HttpRequest,
    ProviderClient,
    ProviderSpec,
    TransportError,
)


async def students(request):
    return web.json_response({
        "success": True,
        "data": [{"studentId": 1, "studentName": "Alice Brown"}],
        "echo": {
            "auth": request.headers.get("Authorization"),
            "year": request.query.get("academicYearId"),
        },
    })


async def broken(request):
    return web.Response(status=500, text="internal error")


async def slow(request):
    await asyncio.sleep(1.0)
    return web.json_response({"success": True, "data": []})


async def echo_body(request):
    return web.json_response({"success": True, "data": await request.json()})


def make_app():
    app = web.Application()
    app.router.add_get("/students", students)
    app.router.add_get("/broken", broken)
    app.router.add_get("/slow", slow)
    app.router.add_post("/echo", echo_body)
    return app


class TestAiohttpTransport:
    """Single-attempt requests over a real socket."""

    @pytest.mark.asyncio
    async def test_get_with_headers_and_params(self):
        """Test GET with headers and query params."""
        async with LocalServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                response = await transport.send(HttpRequest(
                    method="GET",
                    url=str(server.make_url("/students")),
                    headers=RequestContext(token="abc").headers(),
                    params={"academicYearId": "2"},
                ))

        assert response.ok
        payload = response.json()
        assert payload["echo"] == {"auth": "Bearer abc", "year": "2"}
        assert response.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_non_2xx_is_returned_not_raised(self):
        """Test that error statuses are returned."""
        async with LocalServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                response = await transport.send(HttpRequest(
                    method="GET", url=str(server.make_url("/broken")), headers={}
                ))

        assert response.status == 500
        assert not response.ok

    @pytest.mark.asyncio
    async def test_post_json_body(self):
        """Test POST with a JSON body."""
        async with LocalServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                response = await transport.send(HttpRequest(
                    method="POST", url=str(server.make_url("/echo")), headers={}, json_body={"scope": "all"}
                ))

        assert response.json()["data"] == {"scope": "all"}

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self):
        """Test request timeout."""
        async with LocalServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                with pytest.raises(TransportError, match="timed out"):
                    await transport.send(HttpRequest(
                        method="GET", url=str(server.make_url("/slow")), headers={}, timeout=0.1
                    ))

    @pytest.mark.asyncio
    async def test_connection_refused_raises_transport_error(self):
        """Test an unreachable server."""
        server = LocalServer(make_app())
        await server.start_server()
        url = str(server.make_url("/students"))
        await server.close()

        async with AiohttpTransport() as transport:
            with pytest.raises(TransportError):
                await transport.send(HttpRequest(method="GET", url=url, headers={}, timeout=2.0))

    @pytest.mark.asyncio
    async def test_session_is_reused_and_closed(self):
        """Test session reuse and close."""
        async with LocalServer(make_app()) as server:
            transport = AiohttpTransport()
            url = str(server.make_url("/students"))
            await transport.send(HttpRequest(method="GET", url=url, headers={}))
            session = transport._session
            await transport.send(HttpRequest(method="GET", url=url, headers={}))

            assert transport._session is session
            await transport.close()
            assert session.closed

    @pytest.mark.asyncio
    async def test_provider_client_end_to_end(self):
        """Test a provider client over HTTP."""
        async with LocalServer(make_app()) as server:
            base_url = str(server.make_url("/")).rstrip("/")
            async with AiohttpTransport() as transport:
                good = ProviderClient(ProviderSpec(name="students", path="students"), transport, base_url=base_url)
                bad = ProviderClient(ProviderSpec(name="broken", path="broken"), transport, base_url=base_url)

                good_outcome = await good.fetch(RequestContext(token="abc"))
                bad_outcome = await bad.fetch(RequestContext(token="abc"))

        assert [r.display_name for r in good_outcome.records] == ["Alice Brown"]
        assert not bad_outcome.ok
        assert "500" in bad_outcome.reason
