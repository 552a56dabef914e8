"""NetworkManager backend implementation."""

import logging
import re

from dnschanger.core.base import BaseNetworkBackend
from dnschanger.core.exceptions import InterfaceNotFound
from dnschanger.core.models import BackendType, DNSConfiguration, DNSMode, NetworkInterface
from dnschanger.core.validators import split_by_family

logger = logging.getLogger(__name__)

_VALUE_SEPARATORS = re.compile(r"[,\s]+")


def split_terse(line: str) -> list[str]:
    """
    Split one line of ``nmcli -t`` output into fields.

    Terse mode separates fields with ``:`` and escapes literal ``:`` and
    ``\\`` inside values with a backslash.
    """
    fields: list[str] = []
    current: list[str] = []
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def parse_address_list(value: str) -> list[str]:
    """Parse an nmcli DNS property value into addresses."""
    return [v for v in _VALUE_SEPARATORS.split(value.strip()) if v]


class NetworkManagerBackend(BaseNetworkBackend):
    """
    Backend for hosts managed by NetworkManager.

    Interfaces are devices with an active connection profile. Resolvers are
    stored in the profile, so writes modify the profile and re-activate it.
    """

    backend_type = BackendType.NETWORKMANAGER
    executable = "nmcli"
    not_found_markers = (
        "unknown connection",
        "no such connection",
        "unknown device",
        "not found",
    )

    def __init__(self, use_sudo: bool = False, sudo_path: str = "sudo", nmcli_path: str = "nmcli"):
        super().__init__(use_sudo=use_sudo, sudo_path=sudo_path)
        self.executable = nmcli_path

    # ========================================================================
    # Interface Discovery
    # ========================================================================

    async def _active_connections(self) -> dict[str, str]:
        """Map device name to the active connection profile bound to it."""
        stdout, stderr, rc = await self._run(
            "-t", "-f", "NAME,DEVICE", "connection", "show", "--active"
        )
        if rc != 0:
            self._raise_for_error(stderr)

        connections: dict[str, str] = {}
        for line in stdout.splitlines():
            if not line.strip():
                continue
            parts = split_terse(line)
            if len(parts) < 2:
                continue
            name, device = parts[0], parts[1]
            if not device or device == "lo" or device in connections:
                continue
            connections[device] = name
        return connections

    async def _runtime_dns(self, device: str | None = None) -> dict[str, list[str]]:
        """Read the resolvers each device is actually using."""
        args = ["-t", "-f", "GENERAL.DEVICE,IP4.DNS,IP6.DNS", "device", "show"]
        if device:
            args.append(device)

        stdout, stderr, rc = await self._run(*args)
        if rc != 0:
            self._raise_for_error(stderr, interface=device)

        runtime: dict[str, list[str]] = {}
        current = device
        for line in stdout.splitlines():
            parts = split_terse(line)
            if len(parts) < 2:
                continue
            key, value = parts[0], ":".join(parts[1:])
            if key == "GENERAL.DEVICE":
                current = value
                runtime.setdefault(current, [])
            elif current and (key.startswith("IP4.DNS") or key.startswith("IP6.DNS")):
                runtime.setdefault(current, []).extend(parse_address_list(value))
        return runtime

    async def list_interfaces(self) -> list[NetworkInterface]:
        connections = await self._active_connections()
        runtime = await self._runtime_dns() if connections else {}

        return [
            NetworkInterface(
                name=device,
                connection=connection,
                addresses=runtime.get(device, []),
            )
            for device, connection in sorted(connections.items())
        ]

    async def _connection_for(self, interface: str) -> str:
        connections = await self._active_connections()
        if interface not in connections:
            raise InterfaceNotFound(
                interface, f"Interface '{interface}' has no active NetworkManager connection"
            )
        return connections[interface]

    # ========================================================================
    # Configuration
    # ========================================================================

    async def get_configuration(self, interface: str) -> DNSConfiguration:
        connection = await self._connection_for(interface)

        stdout, stderr, rc = await self._run(
            "-t", "-f", "ipv4.dns,ipv6.dns", "connection", "show", connection
        )
        if rc != 0:
            self._raise_for_error(stderr, interface=interface)

        v4: list[str] = []
        v6: list[str] = []
        for line in stdout.splitlines():
            parts = split_terse(line)
            if len(parts) < 2:
                continue
            key, value = parts[0], ":".join(parts[1:])
            if key == "ipv4.dns":
                v4 = parse_address_list(value)
            elif key == "ipv6.dns":
                v6 = parse_address_list(value)

        static = v4 + v6
        if static:
            return DNSConfiguration(interface=interface, mode=DNSMode.STATIC, addresses=static)

        runtime = await self._runtime_dns(interface)
        return DNSConfiguration(
            interface=interface,
            mode=DNSMode.AUTOMATIC,
            addresses=runtime.get(interface, []),
        )

    def canonical_order(self, addresses: list[str]) -> list[str]:
        # Profiles keep IPv4 and IPv6 resolvers in separate properties.
        v4, v6 = split_by_family(addresses)
        return v4 + v6

    async def set_static(self, interface: str, addresses: list[str]) -> None:
        connection = await self._connection_for(interface)
        v4, v6 = split_by_family(addresses)

        await self._modify(
            interface,
            connection,
            "ipv4.dns", ",".join(v4),
            "ipv4.ignore-auto-dns", "yes" if v4 else "no",
            "ipv6.dns", ",".join(v6),
            "ipv6.ignore-auto-dns", "yes" if v6 else "no",
        )
        logger.info(f"Set static DNS on {interface} ({connection}): {addresses}")

    async def set_automatic(self, interface: str) -> None:
        connection = await self._connection_for(interface)

        await self._modify(
            interface,
            connection,
            "ipv4.dns", "",
            "ipv4.ignore-auto-dns", "no",
            "ipv6.dns", "",
            "ipv6.ignore-auto-dns", "no",
        )
        logger.info(f"Set automatic DNS on {interface} ({connection})")

    async def _modify(self, interface: str, connection: str, *settings: str) -> None:
        """Change profile settings in one command, then re-activate it."""
        stdout, stderr, rc = await self._run(
            "connection", "modify", connection, *settings, privileged=True
        )
        if rc != 0:
            self._raise_for_error(stderr, interface=interface, write=True)

        stdout, stderr, rc = await self._run("connection", "up", connection, privileged=True)
        if rc != 0:
            self._raise_for_error(stderr, interface=interface, write=True)
