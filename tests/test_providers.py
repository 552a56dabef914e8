"""Tests for the provider catalog."""

import json

import pytest

from dnschanger.core.exceptions import ProviderNotFound, ProvidersFileError
from dnschanger.core.models import DNSProvider
from dnschanger.core.providers import (
    CUSTOM_KEY,
    DEFAULT_PROVIDERS,
    ProviderCatalog,
    load_providers_file,
)


class TestProviderCatalog:
    """Tests for ProviderCatalog."""

    def test_default_order(self):
        catalog = ProviderCatalog()
        names = [p.name for p in catalog.providers]
        assert names == ["Cloudflare", "Google", "Quad9", "OpenDNS"]

    def test_default_addresses(self):
        catalog = ProviderCatalog()
        assert catalog.get("cloudflare").addresses == ["1.1.1.1", "1.0.0.1"]
        assert catalog.get("Quad9").addresses == ["9.9.9.9", "149.112.112.112"]

    def test_choices_end_with_custom(self):
        choices = ProviderCatalog().choices()
        assert len(choices) == len(DEFAULT_PROVIDERS) + 1
        assert choices[-1].custom is True
        assert choices[-1].key == CUSTOM_KEY
        assert choices[-1].provider is None
        assert all(not c.custom for c in choices[:-1])

    def test_choices_are_stable(self):
        first = [c.key for c in ProviderCatalog().choices()]
        second = [c.key for c in ProviderCatalog().choices()]
        assert first == second

    def test_user_provider_appended(self, catalog, sample_provider):
        names = [p.name for p in catalog.providers]
        assert names[-1] == "AdGuard"
        assert catalog.choices()[-2].provider == sample_provider
        assert catalog.choices()[-1].custom is True

    def test_user_provider_replaces_preset(self):
        override = DNSProvider(name="google", addresses=["8.8.8.8"])
        catalog = ProviderCatalog([override])
        names = [p.name for p in catalog.providers]
        assert names == ["Cloudflare", "google", "Quad9", "OpenDNS"]
        assert catalog.get("Google").addresses == ["8.8.8.8"]

    def test_unknown_provider(self):
        with pytest.raises(ProviderNotFound):
            ProviderCatalog().get("nope")

    def test_defaults_not_mutated(self):
        ProviderCatalog([DNSProvider(name="Cloudflare", addresses=["1.1.1.1"])])
        assert DEFAULT_PROVIDERS[0].addresses == ["1.1.1.1", "1.0.0.1"]


class TestProvidersFile:
    """Tests for loading the user providers file."""

    def test_load(self, tmp_path):
        path = tmp_path / "providers.json"
        path.write_text(
            json.dumps(
                [{"name": "AdGuard", "addresses": ["94.140.14.14"], "description": "Ads"}]
            )
        )
        providers = load_providers_file(path)
        assert providers == [
            DNSProvider(name="AdGuard", addresses=["94.140.14.14"], description="Ads")
        ]

    def test_from_file(self, tmp_path):
        path = tmp_path / "providers.json"
        path.write_text(json.dumps([{"name": "Local", "addresses": ["10.0.0.53"]}]))
        catalog = ProviderCatalog.from_file(path)
        assert catalog.get("local").addresses == ["10.0.0.53"]

    def test_from_file_none(self):
        assert len(ProviderCatalog.from_file(None).providers) == len(DEFAULT_PROVIDERS)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProvidersFileError):
            load_providers_file(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "providers.json"
        path.write_text("{not json")
        with pytest.raises(ProvidersFileError):
            load_providers_file(path)

    def test_invalid_address_in_file(self, tmp_path):
        path = tmp_path / "providers.json"
        path.write_text(json.dumps([{"name": "Bad", "addresses": ["999.1.1.1"]}]))
        with pytest.raises(ProvidersFileError):
            load_providers_file(path)
