"""Core data models for DNS Changer."""

import ipaddress
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendType(str, Enum):
    """Supported OS network configuration backends."""

    NETWORKMANAGER = "networkmanager"
    RESOLVED = "resolved"


class DNSMode(str, Enum):
    """How an interface obtains its resolvers."""

    STATIC = "static"
    AUTOMATIC = "automatic"


# ============================================================================
# Provider Models
# ============================================================================


class DNSProvider(BaseModel):
    """Named preset of resolver addresses."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name")
    addresses: list[str] = Field(..., min_length=1, description="Primary first")
    description: str = Field(default="", description="Short description")

    @field_validator("addresses")
    @classmethod
    def _check_addresses(cls, value: list[str]) -> list[str]:
        normalized = []
        for address in value:
            normalized.append(str(ipaddress.ip_address(address.strip())))
        return normalized

    @property
    def label(self) -> str:
        if self.description:
            return f"{self.name} - {self.description}"
        return self.name


class ProviderChoice(BaseModel):
    """One entry of the provider menu: a preset or the custom option."""

    key: str
    label: str
    provider: DNSProvider | None = None
    custom: bool = False


# ============================================================================
# Interface / Configuration Models
# ============================================================================


class NetworkInterface(BaseModel):
    """OS network interface whose resolvers can be configured."""

    name: str = Field(..., description="Interface identifier, e.g. eth0")
    connection: str | None = Field(default=None, description="Bound connection profile")
    addresses: list[str] = Field(default_factory=list, description="Resolvers as last read")


class DNSConfiguration(BaseModel):
    """Resolver configuration of one interface at a point in time."""

    interface: str
    mode: DNSMode = DNSMode.STATIC
    addresses: list[str] = Field(default_factory=list)
    captured_at: datetime = Field(default_factory=datetime.now)

    def same_settings(self, other: "DNSConfiguration") -> bool:
        """Compare mode and resolvers, ignoring capture time."""
        if self.mode != other.mode:
            return False
        if self.mode == DNSMode.AUTOMATIC:
            return True
        return self.addresses == other.addresses


class ApplyResult(BaseModel):
    """Result of a write to the OS configuration."""

    action: str  # apply, automatic, restore
    interface: str
    previous: DNSConfiguration
    current: DNSConfiguration
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)


# ============================================================================
# Probe Models
# ============================================================================


class ProbeResult(BaseModel):
    """Latency probe of a single resolver address."""

    address: str
    query_name: str
    latency_ms: float | None = None
    rcode: str | None = None
    error: str | None = None

    @property
    def reachable(self) -> bool:
        return self.error is None and self.latency_ms is not None
