"""systemd-resolved (resolvectl) backend."""

from dnschanger.core.resolved.client import ResolvedBackend

__all__ = ["ResolvedBackend"]
