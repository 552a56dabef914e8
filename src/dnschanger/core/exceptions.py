"""Exceptions raised while reading or changing resolver configuration."""


class DNSChangerError(RuntimeError):
    """Base error for all DNS Changer failures."""


class NoInterfacesFound(DNSChangerError):
    """No configurable network interface exists or it could not be listed."""


class InterfaceNotFound(DNSChangerError):
    """The interface identifier does not name a known interface."""

    def __init__(self, interface: str, message: str | None = None):
        super().__init__(message or f"Interface '{interface}' not found")
        self.interface = interface


class PermissionDenied(DNSChangerError):
    """The OS refused access, usually because elevated privilege is needed."""


class InvalidAddress(DNSChangerError):
    """An address list failed validation."""

    def __init__(self, message: str, invalid: list[str] | None = None):
        super().__init__(message)
        self.invalid = invalid or []


class ApplyFailed(DNSChangerError):
    """The OS rejected a write for a reason other than permissions."""


class NoPreviousConfiguration(DNSChangerError):
    """Restore was requested before anything was applied in this session."""


class BackendUnavailable(DNSChangerError):
    """The tool behind a backend is not installed or not on PATH."""


class ProviderNotFound(DNSChangerError):
    """No provider with the requested name exists."""


class ProvidersFileError(DNSChangerError):
    """The user providers file could not be read or validated."""
