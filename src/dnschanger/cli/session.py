"""Interactive session: the prompt flow as an explicit state machine."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from dnschanger.core.exceptions import (
    DNSChangerError,
    NoInterfacesFound,
    PermissionDenied,
)
from dnschanger.core.manager import DNSConfigManager
from dnschanger.core.models import ApplyResult, DNSMode, DNSProvider, NetworkInterface

logger = logging.getLogger(__name__)

PRIVILEGE_HINT = "Changing DNS usually needs root. Re-run with sudo or pass --sudo."


class SessionState(str, Enum):
    """States of the interactive flow."""

    SELECT_INTERFACE = "select_interface"
    SELECT_ACTION = "select_action"
    SELECT_PROVIDER = "select_provider"
    ENTER_CUSTOM = "enter_custom"
    CONFIRM_APPLY = "confirm_apply"
    RESULT = "result"
    EXIT = "exit"


class Action(str, Enum):
    """Entries of the main menu, in display order."""

    PROVIDER = "Select DNS Provider"
    CUSTOM = "Custom DNS"
    AUTOMATIC = "Automatic DNS (Router)"
    SHOW = "Show Current DNS"
    RESTORE = "Restore Previous DNS"
    CHANGE_INTERFACE = "Change Interface"
    EXIT = "Exit"


class Prompter(ABC):
    """Source of user input and sink for status lines."""

    @abstractmethod
    def choose(self, prompt: str, options: list[str], default: int = 0) -> int:
        """Return the index of the chosen option."""
        ...

    @abstractmethod
    def ask(self, prompt: str, default: str = "") -> str:
        """Return free text typed by the user."""
        ...

    @abstractmethod
    def confirm(self, prompt: str, default: bool = True) -> bool:
        ...

    @abstractmethod
    def show(self, message: str, style: str | None = None) -> None:
        """Print one line of output."""
        ...


@dataclass
class PendingChange:
    """Change chosen by the user and waiting for confirmation."""

    kind: str  # apply, automatic, restore
    description: str
    addresses: list[str] = field(default_factory=list)
    provider: DNSProvider | None = None


class InteractiveSession:
    """
    Drives SELECT_INTERFACE -> SELECT_ACTION -> SELECT_PROVIDER / ENTER_CUSTOM
    -> CONFIRM_APPLY -> RESULT, looping back to SELECT_ACTION until EXIT.

    Errors end the current action only; the session returns to the action
    menu. PermissionDenied additionally offers a retry.
    """

    def __init__(self, manager: DNSConfigManager, prompter: Prompter):
        self.manager = manager
        self.prompter = prompter
        self.state = SessionState.SELECT_INTERFACE
        self.interface: NetworkInterface | None = None
        self.pending: PendingChange | None = None
        self.last_result: ApplyResult | None = None
        self.last_error: DNSChangerError | None = None
        self.exit_code = 0

        self._handlers = {
            SessionState.SELECT_INTERFACE: self._select_interface,
            SessionState.SELECT_ACTION: self._select_action,
            SessionState.SELECT_PROVIDER: self._select_provider,
            SessionState.ENTER_CUSTOM: self._enter_custom,
            SessionState.CONFIRM_APPLY: self._confirm_apply,
            SessionState.RESULT: self._result,
        }

    async def run(self) -> int:
        """Run until the user exits; returns the process exit code."""
        while self.state != SessionState.EXIT:
            logger.debug(f"Session state: {self.state.value}")
            self.state = await self._handlers[self.state]()
        return self.exit_code

    # ========================================================================
    # State Handlers
    # ========================================================================

    async def _select_interface(self) -> SessionState:
        try:
            interfaces = await self.manager.list_interfaces()
        except NoInterfacesFound as e:
            self._error(str(e), e)
            self.exit_code = 1
            return SessionState.EXIT

        if len(interfaces) == 1:
            self.interface = interfaces[0]
        else:
            labels = [self._interface_label(i) for i in interfaces]
            index = self.prompter.choose("Select network interface", labels)
            self.interface = interfaces[index]

        self.prompter.show(f"Current interface: {self._interface_label(self.interface)}")
        return SessionState.SELECT_ACTION

    async def _select_action(self) -> SessionState:
        actions = list(Action)
        action = actions[self.prompter.choose("Choose an option", [a.value for a in actions])]

        if action == Action.PROVIDER:
            return SessionState.SELECT_PROVIDER
        if action == Action.CUSTOM:
            return SessionState.ENTER_CUSTOM
        if action == Action.AUTOMATIC:
            self.pending = PendingChange(kind="automatic", description="automatic DNS (router)")
            return SessionState.CONFIRM_APPLY
        if action == Action.RESTORE:
            previous = self.manager.previous
            if previous is None:
                self.prompter.show("Nothing to restore yet in this session", style="yellow")
                return SessionState.SELECT_ACTION
            summary = self._describe(previous.mode, previous.addresses)
            self.pending = PendingChange(
                kind="restore",
                description=f"previous DNS of {previous.interface} ({summary})",
            )
            return SessionState.CONFIRM_APPLY
        if action == Action.SHOW:
            await self._show_current()
            return SessionState.SELECT_ACTION
        if action == Action.CHANGE_INTERFACE:
            return SessionState.SELECT_INTERFACE

        self.prompter.show("Goodbye!")
        self.exit_code = 1 if self.last_error else 0
        return SessionState.EXIT

    async def _select_provider(self) -> SessionState:
        choices = self.manager.list_providers()
        choice = choices[self.prompter.choose("Select DNS Provider", [c.label for c in choices])]

        if choice.custom:
            return SessionState.ENTER_CUSTOM

        provider = choice.provider
        self.pending = PendingChange(
            kind="apply",
            description=f"{provider.name} ({', '.join(provider.addresses)})",
            addresses=list(provider.addresses),
            provider=provider,
        )
        return SessionState.CONFIRM_APPLY

    async def _enter_custom(self) -> SessionState:
        primary = self.prompter.ask("Enter primary DNS")
        secondary = self.prompter.ask("Enter secondary DNS (blank for none)", default="")
        addresses = [a for a in (primary, secondary) if a.strip()]

        self.pending = PendingChange(
            kind="apply",
            description=f"custom ({', '.join(addresses) or 'none'})",
            addresses=addresses,
        )
        return SessionState.CONFIRM_APPLY

    async def _confirm_apply(self) -> SessionState:
        if not self.prompter.confirm(f"Apply {self.pending.description} to {self.interface.name}?"):
            self.prompter.show("Cancelled, DNS unchanged")
            self.pending = None
            return SessionState.SELECT_ACTION
        return SessionState.RESULT

    async def _result(self) -> SessionState:
        change = self.pending
        self.pending = None

        while True:
            try:
                result = await self._execute(change)
            except PermissionDenied as e:
                self._error(f"Permission denied: {e}", e)
                self.prompter.show(PRIVILEGE_HINT, style="yellow")
                backend = self.manager.backend
                retry_prompt = "Retry now?" if backend.use_sudo else "Retry with sudo?"
                if self.prompter.confirm(retry_prompt, default=False):
                    if not backend.use_sudo:
                        logger.info("Retrying writes through sudo")
                        backend.use_sudo = True
                    continue
                return SessionState.SELECT_ACTION
            except DNSChangerError as e:
                self._error(str(e), e)
                return SessionState.SELECT_ACTION

            self.last_result = result
            self.last_error = None
            self.prompter.show(f"✓ {result.message}", style="green")
            return SessionState.SELECT_ACTION

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _execute(self, change: PendingChange) -> ApplyResult:
        name = self.interface.name
        if change.kind == "automatic":
            return await self.manager.use_automatic(name)
        if change.kind == "restore":
            return await self.manager.restore_previous()
        if change.provider is not None:
            return await self.manager.apply_provider(name, change.provider)
        return await self.manager.apply_dns(name, change.addresses)

    async def _show_current(self) -> None:
        try:
            config = await self.manager.get_configuration(self.interface.name)
        except PermissionDenied as e:
            self._error(f"Permission denied: {e}", e)
            self.prompter.show(PRIVILEGE_HINT, style="yellow")
            return
        except DNSChangerError as e:
            self._error(str(e), e)
            return

        self.last_error = None
        self.prompter.show(
            f"{config.interface}: {self._describe(config.mode, config.addresses)}"
        )

    def _error(self, message: str, error: DNSChangerError | None = None) -> None:
        self.last_error = error or DNSChangerError(message)
        self.prompter.show(f"✗ {message}", style="red")

    @staticmethod
    def _describe(mode: DNSMode, addresses: list[str]) -> str:
        servers = ", ".join(addresses) if addresses else "no servers"
        return f"{mode.value}, {servers}"

    @staticmethod
    def _interface_label(interface: NetworkInterface) -> str:
        if interface.connection:
            return f"{interface.name} ({interface.connection})"
        return interface.name
