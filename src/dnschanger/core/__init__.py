"""Core library modules for reading and changing resolver configuration."""

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

__all__ = [
    "ApplyResult",
    "BackendType",
    "DNSConfiguration",
    "DNSMode",
    "DNSProvider",
    "NetworkInterface",
    "ProbeResult",
    "ProviderChoice",
]
