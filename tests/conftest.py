"""Pytest configuration and fixtures."""

import pytest

from dnschanger.cli.session import Prompter
from dnschanger.core.base import BaseNetworkBackend
from dnschanger.core.exceptions import InterfaceNotFound
from dnschanger.core.manager import DNSConfigManager
from dnschanger.core.models import (
    BackendType,
    DNSConfiguration,
    DNSMode,
    DNSProvider,
    NetworkInterface,
)
from dnschanger.core.providers import ProviderCatalog


class InMemoryBackend(BaseNetworkBackend):
    """Backend double holding the OS store in a dict."""

    backend_type = BackendType.NETWORKMANAGER
    executable = "true"

    def __init__(self, store: dict[str, DNSConfiguration] | None = None):
        super().__init__()
        self.store = store if store is not None else {}
        self.dhcp_servers: dict[str, list[str]] = {}
        self.writes: list[tuple[str, str, list[str]]] = []
        self.write_error: Exception | None = None
        self.read_error: Exception | None = None
        self.list_error: Exception | None = None

    def _require(self, interface: str) -> DNSConfiguration:
        if interface not in self.store:
            raise InterfaceNotFound(interface)
        return self.store[interface]

    async def list_interfaces(self) -> list[NetworkInterface]:
        if self.list_error:
            raise self.list_error
        return [
            NetworkInterface(name=name, addresses=list(config.addresses))
            for name, config in self.store.items()
        ]

    async def get_configuration(self, interface: str) -> DNSConfiguration:
        if self.read_error:
            raise self.read_error
        config = self._require(interface)
        return config.model_copy(deep=True)

    async def set_static(self, interface: str, addresses: list[str]) -> None:
        self._require(interface)
        if self.write_error:
            raise self.write_error
        self.writes.append(("static", interface, list(addresses)))
        self.store[interface] = DNSConfiguration(
            interface=interface, mode=DNSMode.STATIC, addresses=list(addresses)
        )

    async def set_automatic(self, interface: str) -> None:
        self._require(interface)
        if self.write_error:
            raise self.write_error
        self.writes.append(("automatic", interface, []))
        self.store[interface] = DNSConfiguration(
            interface=interface,
            mode=DNSMode.AUTOMATIC,
            addresses=list(self.dhcp_servers.get(interface, [])),
        )


class ScriptedPrompter(Prompter):
    """Feeds canned answers and records every line shown."""

    def __init__(self, answers: list):
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def _next(self, prompt: str):
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for prompt: {prompt}")
        return self.answers.pop(0)

    def choose(self, prompt: str, options: list[str], default: int = 0) -> int:
        answer = self._next(prompt)
        if isinstance(answer, str):
            return options.index(answer)
        return answer

    def ask(self, prompt: str, default: str = "") -> str:
        return self._next(prompt)

    def confirm(self, prompt: str, default: bool = True) -> bool:
        return self._next(prompt)

    def show(self, message: str, style: str | None = None) -> None:
        self.lines.append(message)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def backend() -> InMemoryBackend:
    """Backend with one automatic and one static interface."""
    store = {
        "eth0": DNSConfiguration(
            interface="eth0", mode=DNSMode.AUTOMATIC, addresses=["192.168.1.1"]
        ),
        "wlan0": DNSConfiguration(
            interface="wlan0", mode=DNSMode.STATIC, addresses=["9.9.9.9"]
        ),
    }
    backend = InMemoryBackend(store)
    backend.dhcp_servers = {"eth0": ["192.168.1.1"], "wlan0": ["10.0.0.1"]}
    return backend


@pytest.fixture
def single_backend() -> InMemoryBackend:
    """Backend with only eth0, so the session skips interface selection."""
    backend = InMemoryBackend(
        {
            "eth0": DNSConfiguration(
                interface="eth0", mode=DNSMode.AUTOMATIC, addresses=["192.168.1.1"]
            )
        }
    )
    backend.dhcp_servers = {"eth0": ["192.168.1.1"]}
    return backend


@pytest.fixture
def manager(backend: InMemoryBackend) -> DNSConfigManager:
    return DNSConfigManager(backend)


@pytest.fixture
def sample_provider() -> DNSProvider:
    return DNSProvider(
        name="AdGuard",
        addresses=["94.140.14.14", "94.140.15.15"],
        description="Ad blocking DNS",
    )


@pytest.fixture
def catalog(sample_provider: DNSProvider) -> ProviderCatalog:
    return ProviderCatalog([sample_provider])
