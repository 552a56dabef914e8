"""DNS configuration manager."""

import asyncio
import logging
import shutil

from dnschanger.core.base import BaseNetworkBackend
from dnschanger.core.exceptions import (
    ApplyFailed,
    BackendUnavailable,
    DNSChangerError,
    NoInterfacesFound,
    NoPreviousConfiguration,
)
from dnschanger.core.models import (
    ApplyResult,
    BackendType,
    DNSConfiguration,
    DNSMode,
    DNSProvider,
    NetworkInterface,
    ProbeResult,
    ProviderChoice,
)
from dnschanger.core.networkmanager.client import NetworkManagerBackend
from dnschanger.core.probe import ResolverProbe
from dnschanger.core.providers import ProviderCatalog
from dnschanger.core.resolved.client import ResolvedBackend
from dnschanger.core.validators import validate_addresses

logger = logging.getLogger(__name__)


def create_backend(backend: BackendType | None = None, use_sudo: bool = False) -> BaseNetworkBackend:
    """
    Create the backend for the requested type.

    With no type given, NetworkManager is preferred when nmcli is installed,
    then systemd-resolved.
    """
    if backend == BackendType.NETWORKMANAGER:
        return NetworkManagerBackend(use_sudo=use_sudo)
    if backend == BackendType.RESOLVED:
        return ResolvedBackend(use_sudo=use_sudo)

    if shutil.which("nmcli"):
        return NetworkManagerBackend(use_sudo=use_sudo)
    if shutil.which("resolvectl"):
        return ResolvedBackend(use_sudo=use_sudo)

    raise BackendUnavailable(
        "No supported network configuration tool found (need nmcli or resolvectl)"
    )


class DNSConfigManager:
    """
    Reads and changes resolver configuration through one backend.

    Every read goes to the OS; nothing is cached except the configuration
    captured before the last successful write, which restore re-applies.
    """

    def __init__(
        self,
        backend: BaseNetworkBackend,
        catalog: ProviderCatalog | None = None,
        probe: ResolverProbe | None = None,
    ):
        self.backend = backend
        self.catalog = catalog or ProviderCatalog()
        self.probe = probe or ResolverProbe()
        self.previous: DNSConfiguration | None = None
        self._lock = asyncio.Lock()

    # ========================================================================
    # Reads
    # ========================================================================

    async def list_interfaces(self) -> list[NetworkInterface]:
        """List configurable interfaces, sorted by name."""
        try:
            interfaces = await self.backend.list_interfaces()
        except DNSChangerError as e:
            raise NoInterfacesFound(f"Could not list network interfaces: {e}") from e

        if not interfaces:
            raise NoInterfacesFound("No configurable network interfaces found")
        return sorted(interfaces, key=lambda i: i.name)

    async def get_configuration(self, interface: str) -> DNSConfiguration:
        return await self.backend.get_configuration(interface)

    async def get_current_dns(self, interface: str) -> list[str]:
        """Current resolver addresses of an interface."""
        config = await self.backend.get_configuration(interface)
        return config.addresses

    def list_providers(self) -> list[ProviderChoice]:
        return self.catalog.choices()

    # ========================================================================
    # Writes
    # ========================================================================

    async def apply_dns(self, interface: str, addresses: list[str]) -> ApplyResult:
        """Validate and write a complete resolver list for an interface."""
        validated = validate_addresses(addresses)

        async with self._lock:
            return await self._apply_static(interface, validated, action="apply")

    async def apply_provider(self, interface: str, provider: DNSProvider) -> ApplyResult:
        result = await self.apply_dns(interface, provider.addresses)
        result.message = f"DNS set to {provider.name} ({', '.join(result.current.addresses)})"
        return result

    async def use_automatic(self, interface: str) -> ApplyResult:
        """Switch an interface back to DHCP-provided resolvers."""
        async with self._lock:
            return await self._apply_automatic(interface, action="automatic")

    async def restore_previous(self) -> ApplyResult:
        """Re-apply the configuration captured before the last write."""
        async with self._lock:
            record = self.previous
            if record is None:
                raise NoPreviousConfiguration("Nothing to restore in this session")

            logger.info(
                f"Restoring {record.interface} to {record.mode.value} {record.addresses}"
            )
            if record.mode == DNSMode.AUTOMATIC:
                return await self._apply_automatic(record.interface, action="restore")
            return await self._apply_static(
                record.interface, validate_addresses(record.addresses), action="restore"
            )

    async def _apply_static(self, interface: str, addresses: list[str], action: str) -> ApplyResult:
        previous = await self.backend.get_configuration(interface)
        expected = self.backend.canonical_order(addresses)

        await self._write(previous, self.backend.set_static, interface, addresses)

        current = await self.backend.get_configuration(interface)
        if current.mode != DNSMode.STATIC or current.addresses != expected:
            await self._rollback(previous)
            raise ApplyFailed(
                f"{interface} reports {current.addresses} after writing {expected}"
            )

        self.previous = previous
        logger.info(f"{action}: {interface} DNS {previous.addresses} -> {current.addresses}")
        return ApplyResult(
            action=action,
            interface=interface,
            previous=previous,
            current=current,
            message=f"DNS set to {', '.join(current.addresses)}",
        )

    async def _apply_automatic(self, interface: str, action: str) -> ApplyResult:
        previous = await self.backend.get_configuration(interface)

        await self._write(previous, self.backend.set_automatic, interface)

        current = await self.backend.get_configuration(interface)
        if not self.backend.verify_automatic(current):
            await self._rollback(previous)
            raise ApplyFailed(f"{interface} still has static DNS {current.addresses}")

        self.previous = previous
        logger.info(f"{action}: {interface} switched to automatic DNS")
        return ApplyResult(
            action=action,
            interface=interface,
            previous=previous,
            current=current,
            message="Switched to automatic DNS (router)",
        )

    async def _write(self, previous: DNSConfiguration, write, interface: str, *args) -> None:
        """Run a backend write; on ApplyFailed put the old settings back."""
        try:
            await write(interface, *args)
        except ApplyFailed:
            try:
                current = await self.backend.get_configuration(interface)
            except DNSChangerError:
                logger.exception(f"Could not re-read {interface} after failed write")
                current = None
            if current is None or not current.same_settings(previous):
                await self._rollback(previous)
            raise

    async def _rollback(self, previous: DNSConfiguration) -> None:
        logger.warning(f"Rolling back {previous.interface} to {previous.addresses}")
        try:
            if previous.mode == DNSMode.AUTOMATIC or not previous.addresses:
                await self.backend.set_automatic(previous.interface)
            else:
                await self.backend.set_static(previous.interface, previous.addresses)
        except DNSChangerError:
            logger.exception(f"Rollback of {previous.interface} failed")

    # ========================================================================
    # Probing
    # ========================================================================

    async def probe_provider(self, provider: DNSProvider) -> list[ProbeResult]:
        return await self.probe.probe_all(provider.addresses)

    async def probe_addresses(self, addresses: list[str]) -> list[ProbeResult]:
        return await self.probe.probe_all(validate_addresses(addresses))
