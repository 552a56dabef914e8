"""Global CLI options and the objects built from them."""

from enum import Enum
from pathlib import Path
from typing import Optional

from dnschanger.core.manager import DNSConfigManager, create_backend
from dnschanger.core.models import BackendType
from dnschanger.core.providers import ProviderCatalog


class BackendChoice(str, Enum):
    """Backend selection on the command line."""

    AUTO = "auto"
    NETWORKMANAGER = "networkmanager"
    RESOLVED = "resolved"


# Global options stored in context
class GlobalOptions:
    def __init__(self):
        self.backend: BackendChoice = BackendChoice.AUTO
        self.use_sudo: bool = False
        self.providers_file: Optional[Path] = None
        self.verbose: bool = False
        self.debug: bool = False


def get_manager(options: GlobalOptions) -> DNSConfigManager:
    """Build a manager for the configured backend and providers."""
    backend_type = None
    if options.backend != BackendChoice.AUTO:
        backend_type = BackendType(options.backend.value)

    backend = create_backend(backend_type, use_sudo=options.use_sudo)
    return DNSConfigManager(backend, catalog=get_catalog(options))


def get_catalog(options: GlobalOptions) -> ProviderCatalog:
    """Provider catalog without touching any network backend."""
    return ProviderCatalog.from_file(options.providers_file)
