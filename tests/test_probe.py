"""Tests for the resolver latency probe."""

from unittest.mock import MagicMock, patch

import dns.exception
import dns.rcode
import pytest

from dnschanger.core.probe import ResolverProbe


class TestResolverProbe:
    """Tests for ResolverProbe."""

    @pytest.mark.asyncio
    async def test_probe_answer(self):
        response = MagicMock()
        response.rcode.return_value = dns.rcode.NOERROR

        with patch("dnschanger.core.probe.dns.query.udp", return_value=response) as udp:
            result = await ResolverProbe(query_name="example.org", timeout=1.0).probe("1.1.1.1")

        assert result.reachable is True
        assert result.rcode == "NOERROR"
        assert result.query_name == "example.org"
        assert result.latency_ms >= 0
        assert udp.call_args.args[1] == "1.1.1.1"
        assert udp.call_args.kwargs["timeout"] == 1.0

    @pytest.mark.asyncio
    async def test_probe_timeout(self):
        with patch(
            "dnschanger.core.probe.dns.query.udp",
            side_effect=dns.exception.Timeout(),
        ):
            result = await ResolverProbe().probe("192.0.2.1")

        assert result.reachable is False
        assert result.latency_ms is None
        assert result.error

    @pytest.mark.asyncio
    async def test_probe_all_keeps_order(self):
        response = MagicMock()
        response.rcode.return_value = dns.rcode.NXDOMAIN

        with patch("dnschanger.core.probe.dns.query.udp", return_value=response):
            results = await ResolverProbe().probe_all(["9.9.9.9", "149.112.112.112"])

        assert [r.address for r in results] == ["9.9.9.9", "149.112.112.112"]
        assert all(r.rcode == "NXDOMAIN" for r in results)
