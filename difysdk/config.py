"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass
class ClientConfig:
    """Client settings; ``api_secret_key`` is deprecated, ``timeout`` is in seconds."""

    host: str = ""
    api_secret_key: str = ""
    default_api_secret: str = ""
    timeout: float | None = None
    transport: httpx.BaseTransport | None = None

    def secret(self) -> str:
        """Return the default API secret, falling back to the deprecated key."""
        return self.default_api_secret or self.api_secret_key