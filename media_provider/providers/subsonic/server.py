from __future__ import annotations

import logging
from typing import Optional

from ...config import ProviderSettings, ServerSettings, Settings
from ...errors import SubsonicError, TransportError
from ...models import LoginResponse
from .client import SubsonicClient
from .provider import SubsonicMediaProvider

logger = logging.getLogger(__name__)

# wrong credentials / token auth not supported for this user
AUTH_ERROR_CODES = frozenset({40, 41})


class SubsonicServer:
    def __init__(
        self,
        settings: ServerSettings,
        provider_settings: Optional[ProviderSettings] = None,
    ) -> None:
        self.settings = settings
        self.provider_settings = provider_settings or ProviderSettings()
        self.client: Optional[SubsonicClient] = None
        self._provider: Optional[SubsonicMediaProvider] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubsonicServer":
        return cls(settings.server, settings.provider)

    def login(self, username: str, password: str) -> LoginResponse:
        settings = self.settings.model_copy(update={"username": username, "password": password})
        client = SubsonicClient(settings)
        try:
            body = client.ping()
        except SubsonicError as exc:
            client.close()
            logger.warning("Login to %s rejected: %s", settings.url, exc)
            return LoginResponse(error=exc, is_auth_error=exc.code in AUTH_ERROR_CODES)
        except TransportError as exc:
            client.close()
            logger.warning("Login to %s failed: %s", settings.url, exc)
            return LoginResponse(error=exc)
        if body.get("openSubsonic"):
            logger.info("Connected to OpenSubsonic server %s", body.get("serverVersion") or settings.url)
        self.close()
        self.settings = settings
        self.client = client
        self._provider = None
        return LoginResponse()

    def media_provider(self) -> SubsonicMediaProvider:
        if self.client is None:
            raise RuntimeError("login() must succeed before requesting a media provider")
        if self._provider is None:
            self._provider = SubsonicMediaProvider(
                self.client,
                cache_ttl_seconds=self.provider_settings.cache_ttl_seconds,
                rating_batch_size=self.provider_settings.rating_batch_size,
                page_size=self.provider_settings.page_size,
            )
        return self._provider

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            self._provider = None
