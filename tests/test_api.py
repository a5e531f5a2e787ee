"""Tests for the high-level API."""

import asyncio

import httpx
import pytest
from pydantic import ValidationError

import ngrok_probe
from inspection_fakes import tunnels_response
from ngrok_probe import CancellationToken, discover_public_url, wait_for_public_url

FAST = {"initial_delay": 0.0, "poll_interval": 0.01}


class TestDiscoverPublicUrl:
    """Test discover_public_url()."""

    @pytest.mark.asyncio
    async def test_returns_handle_that_resolves(self, scripted):
        """Test that the handle resolves in the background."""
        endpoint = scripted(
            httpx.Response(200, json={"tunnels": []}),
            tunnels_response("https://abc.ngrok.app"),
        )

        result = discover_public_url(
            "localhost",
            4040,
            cancel_token=CancellationToken(),
            transport=endpoint.transport,
            **FAST,
        )

        assert await result.wait(timeout=1.0) == "https://abc.ngrok.app"
        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_accepts_several_candidate_hosts(self, scripted):
        """Test that hosts are tried in the given order."""
        endpoint = scripted(
            httpx.ConnectError("connection refused"),
            tunnels_response("https://abc.ngrok.app"),
        )

        result = discover_public_url(
            ["host.docker.internal", "127.0.0.1"],
            4041,
            cancel_token=CancellationToken(),
            transport=endpoint.transport,
            **FAST,
        )

        assert await result.wait(timeout=1.0) == "https://abc.ngrok.app"
        assert endpoint.hosts == ["host.docker.internal", "127.0.0.1"]

    @pytest.mark.asyncio
    async def test_caller_token_stops_background_run(self, scripted, log_lines):
        """Test that the caller can stop a run that would otherwise keep polling."""
        endpoint = scripted(httpx.Response(503))
        token = CancellationToken()

        result = discover_public_url(
            cancel_token=token,
            on_log=log_lines.append,
            transport=endpoint.transport,
            **FAST,
        )
        await asyncio.sleep(0.05)
        token.cancel("application stopping")
        await asyncio.sleep(0.05)
        requests_after_cancel = len(endpoint.requests)
        await asyncio.sleep(0.05)

        assert "[ngrok] discovery cancelled" in log_lines
        assert len(endpoint.requests) == requests_after_cancel
        assert await result.wait(timeout=0.01) is None

    @pytest.mark.asyncio
    async def test_cancel_token_is_required(self):
        """Test that a background run cannot be started without a way to stop it."""
        with pytest.raises(TypeError):
            discover_public_url("localhost", 4040)  # type: ignore[call-arg]

    @pytest.mark.asyncio
    async def test_invalid_options_raise_immediately(self):
        """Test that configuration errors surface before the probe starts."""
        with pytest.raises(ValidationError):
            discover_public_url(
                "localhost", 4040, cancel_token=CancellationToken(), poll_interval=-1
            )


class TestWaitForPublicUrl:
    """Test wait_for_public_url()."""

    @pytest.mark.asyncio
    async def test_returns_url(self, scripted, log_lines):
        """Test that the discovered URL is returned."""
        endpoint = scripted(tunnels_response("http://abc.ngrok.app"))

        url = await wait_for_public_url(
            port=4040, on_log=log_lines.append, transport=endpoint.transport, **FAST
        )

        assert url == "http://abc.ngrok.app"
        assert "[ngrok] public URL resolved: http://abc.ngrok.app" in log_lines

    @pytest.mark.asyncio
    async def test_returns_none_at_deadline(self, scripted):
        """Test that running out of time is not an error."""
        endpoint = scripted(httpx.Response(404))

        url = await wait_for_public_url(
            transport=endpoint.transport, poll_timeout=0.05, **FAST
        )

        assert url is None


def test_package_exports():
    """Test that the public API is importable from the package root."""
    for name in ngrok_probe.__all__:
        assert hasattr(ngrok_probe, name)
    assert ngrok_probe.__version__ == "0.1.0"
