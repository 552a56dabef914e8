"""NetworkManager (nmcli) backend."""

from dnschanger.core.networkmanager.client import NetworkManagerBackend

__all__ = ["NetworkManagerBackend"]
