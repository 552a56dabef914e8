"""Resolver latency probe."""

import asyncio
import logging

import dns.exception
import dns.message
import dns.query
import dns.rcode
import dns.rdatatype

from dnschanger.core.models import ProbeResult

logger = logging.getLogger(__name__)

DEFAULT_QUERY_NAME = "example.com"


class ResolverProbe:
    """Measures how quickly resolver addresses answer a test query."""

    def __init__(
        self,
        query_name: str = DEFAULT_QUERY_NAME,
        record_type: str = "A",
        timeout: float = 2.0,
        port: int = 53,
    ):
        self.query_name = query_name
        self.record_type = record_type
        self.timeout = timeout
        self.port = port

    async def probe(self, address: str) -> ProbeResult:
        """Send one UDP query to an address and time the answer."""
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            rdtype = dns.rdatatype.from_text(self.record_type)
            msg = dns.message.make_query(self.query_name, rdtype)
            response = await asyncio.to_thread(
                dns.query.udp, msg, address, port=self.port, timeout=self.timeout
            )
        except (dns.exception.DNSException, OSError) as e:
            logger.debug(f"Probe of {address} failed: {e}")
            return ProbeResult(
                address=address,
                query_name=self.query_name,
                error=str(e) or e.__class__.__name__,
            )

        latency_ms = (loop.time() - start_time) * 1000
        return ProbeResult(
            address=address,
            query_name=self.query_name,
            latency_ms=latency_ms,
            rcode=dns.rcode.to_text(response.rcode()),
        )

    async def probe_all(self, addresses: list[str]) -> list[ProbeResult]:
        """Probe addresses one after another, keeping input order."""
        results = []
        for address in addresses:
            results.append(await self.probe(address))
        return results
