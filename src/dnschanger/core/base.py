"""Abstract base classes defining the OS network configuration interface."""

import asyncio
import logging
from abc import ABC, abstractmethod

from dnschanger.core.exceptions import (
    ApplyFailed,
    BackendUnavailable,
    DNSChangerError,
    InterfaceNotFound,
    PermissionDenied,
)
from dnschanger.core.models import BackendType, DNSConfiguration, DNSMode, NetworkInterface

logger = logging.getLogger(__name__)

PERMISSION_MARKERS = (
    "not authorized",
    "insufficient privileges",
    "permission denied",
    "access denied",
    "authentication required",
    "operation not permitted",
)


class BaseNetworkBackend(ABC):
    """Abstract base class for OS resolver configuration backends."""

    backend_type: BackendType
    executable: str

    # Phrases in stderr meaning the interface/connection does not exist.
    not_found_markers: tuple[str, ...] = ()

    def __init__(self, use_sudo: bool = False, sudo_path: str = "sudo"):
        self.use_sudo = use_sudo
        self.sudo_path = sudo_path

    # ========================================================================
    # Interface Discovery
    # ========================================================================

    @abstractmethod
    async def list_interfaces(self) -> list[NetworkInterface]:
        """Enumerate interfaces whose resolvers can be configured."""
        ...

    # ========================================================================
    # Configuration
    # ========================================================================

    @abstractmethod
    async def get_configuration(self, interface: str) -> DNSConfiguration:
        """Read the current resolver configuration of an interface."""
        ...

    def canonical_order(self, addresses: list[str]) -> list[str]:
        """Order in which a written list reads back from the OS."""
        return list(addresses)

    def verify_automatic(self, config: DNSConfiguration) -> bool:
        """Whether a read taken after set_automatic shows the switch took effect."""
        return config.mode == DNSMode.AUTOMATIC

    @abstractmethod
    async def set_static(self, interface: str, addresses: list[str]) -> None:
        """Replace the resolver list of an interface in a single write."""
        ...

    @abstractmethod
    async def set_automatic(self, interface: str) -> None:
        """Drop static resolvers so the interface uses DHCP-provided DNS."""
        ...

    # ========================================================================
    # Command Execution
    # ========================================================================

    async def _run(self, *args: str, privileged: bool = False) -> tuple[str, str, int]:
        """Run the backend executable, prefixing sudo for privileged writes."""
        cmd = [self.executable, *args]
        if privileged and self.use_sudo:
            cmd = [self.sudo_path, *cmd]

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise BackendUnavailable(f"'{cmd[0]}' is not installed or not on PATH") from e
        except PermissionError as e:
            raise PermissionDenied(f"Not allowed to execute '{cmd[0]}'") from e

        stdout, stderr = await proc.communicate()
        rc = proc.returncode or 0
        if rc != 0:
            logger.debug(f"{self.executable} exited {rc}: {stderr.decode().strip()}")
        return stdout.decode(), stderr.decode(), rc

    def _raise_for_error(self, stderr: str, interface: str | None = None, write: bool = False) -> None:
        """Translate a failed command into the matching exception."""
        message = stderr.strip() or f"{self.executable} failed"
        lowered = message.lower()

        if any(marker in lowered for marker in PERMISSION_MARKERS):
            raise PermissionDenied(message)
        if interface is not None and any(m in lowered for m in self.not_found_markers):
            raise InterfaceNotFound(interface, message)
        if write:
            raise ApplyFailed(message)
        raise DNSChangerError(f"Could not read configuration: {message}")
