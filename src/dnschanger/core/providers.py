"""Built-in DNS provider presets and the user providers file."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from dnschanger.core.exceptions import ProviderNotFound, ProvidersFileError
from dnschanger.core.models import DNSProvider, ProviderChoice

logger = logging.getLogger(__name__)

CUSTOM_KEY = "custom"

DEFAULT_PROVIDERS: tuple[DNSProvider, ...] = (
    DNSProvider(
        name="Cloudflare",
        addresses=["1.1.1.1", "1.0.0.1"],
        description="Fast and privacy-focused DNS",
    ),
    DNSProvider(
        name="Google",
        addresses=["8.8.8.8", "8.8.4.4"],
        description="Reliable Google DNS",
    ),
    DNSProvider(
        name="Quad9",
        addresses=["9.9.9.9", "149.112.112.112"],
        description="Security-focused DNS",
    ),
    DNSProvider(
        name="OpenDNS",
        addresses=["208.67.222.222", "208.67.220.220"],
        description="Family-safe DNS",
    ),
)

_provider_list = TypeAdapter(list[DNSProvider])


class ProviderCatalog:
    """
    Ordered collection of provider presets.

    User providers are appended after the built-ins; one whose name matches
    a built-in (case insensitive) replaces it in place.
    """

    def __init__(self, providers: list[DNSProvider] | None = None):
        self._providers: list[DNSProvider] = list(DEFAULT_PROVIDERS)
        for provider in providers or []:
            self._merge(provider)

    @classmethod
    def from_file(cls, path: Path | None) -> "ProviderCatalog":
        """Build a catalog from the built-ins plus an optional JSON file."""
        if path is None:
            return cls()
        return cls(load_providers_file(path))

    def _merge(self, provider: DNSProvider) -> None:
        for i, existing in enumerate(self._providers):
            if existing.name.lower() == provider.name.lower():
                self._providers[i] = provider
                return
        self._providers.append(provider)

    @property
    def providers(self) -> list[DNSProvider]:
        return list(self._providers)

    def get(self, name: str) -> DNSProvider:
        """Look up a provider by name, case insensitive."""
        for provider in self._providers:
            if provider.name.lower() == name.strip().lower():
                return provider
        raise ProviderNotFound(f"Unknown DNS provider '{name}'")

    def choices(self) -> list[ProviderChoice]:
        """Presets in catalog order followed by the custom option."""
        entries = [
            ProviderChoice(key=p.name.lower(), label=p.label, provider=p)
            for p in self._providers
        ]
        entries.append(
            ProviderChoice(key=CUSTOM_KEY, label="Custom DNS - enter addresses", custom=True)
        )
        return entries


def load_providers_file(path: Path) -> list[DNSProvider]:
    """
    Load user providers from a JSON file.

    The file holds a list of objects with ``name``, ``addresses`` and an
    optional ``description``.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProvidersFileError(f"Cannot read providers file {path}: {e}") from e

    try:
        data = json.loads(raw)
        providers = _provider_list.validate_python(data)
    except json.JSONDecodeError as e:
        raise ProvidersFileError(f"Providers file {path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise ProvidersFileError(f"Providers file {path} is invalid: {e}") from e

    logger.info(f"Loaded {len(providers)} providers from {path}")
    return providers
