"""Push of changed expiration configurations to the configuration sync endpoint.

Sync is best effort: when no endpoint is configured the changes stay pending
behind the ``config_sync_state`` watermark and go out with the next push.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from sqlalchemy.orm import Session

from ephemera.core.security import create_access_token
from ephemera.core.settings import settings
from ephemera.expiry.errors import ConfigSyncError
from ephemera.expiry.wire import to_wire
from ephemera.models import ConfigSyncState
from ephemera.services.configuration_store import SqlConfigurationStore

logger = logging.getLogger(__name__)

SYNC_PATH = "/config/sync"


class ConfigSyncService:
    """Pushes configuration changes newer than the last synced watermark."""

    def __init__(
        self,
        db: Session,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        instance_id: str | None = None,
    ) -> None:
        self.db = db
        self.base_url = base_url if base_url is not None else settings.config_sync_url
        self.instance_id = instance_id or settings.instance_id
        self._client = client
        self._owns_client = client is None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.base_url) or (self._client is not None and not self._owns_client)

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url or "",
                    timeout=httpx.Timeout(settings.config_sync_timeout_seconds),
                )
        return self._client

    def _sync_state(self) -> ConfigSyncState:
        state = self.db.get(ConfigSyncState, 1)
        if state is None:
            state = ConfigSyncState(id=1, last_synced_at_ms=0)
            self.db.add(state)
            self.db.flush()
        return state

    def _build_payload(self, watermark_ms: int) -> tuple[dict[str, Any], int]:
        changes = SqlConfigurationStore(self.db).changed_since(watermark_ms)
        configurations = []
        newest = watermark_ms
        for config in changes:
            timer, expiration_type = to_wire(config.expiry_mode)
            configurations.append(
                {
                    "thread_id": config.thread_id,
                    "expiry_type": config.expiry_mode.type.value,
                    "expiration_timer": timer,
                    "expiration_type": expiration_type.name,
                    "updated_at_ms": config.updated_at_ms,
                }
            )
            newest = max(newest, config.updated_at_ms)
        return {"instance_id": self.instance_id, "configurations": configurations}, newest

    async def force_sync_if_needed(self) -> bool:
        """Push pending configuration changes.

        Returns:
            True when changes were pushed, False when there was nothing to push
            or no sync endpoint is configured.

        Raises:
            ConfigSyncError: If the endpoint could not be reached or rejected the push.
        """
        if not self.enabled:
            logger.debug("Config sync disabled, leaving changes pending")
            return False

        state = self._sync_state()
        payload, newest = self._build_payload(state.last_synced_at_ms)
        if not payload["configurations"]:
            return False

        client = await self._ensure_client()
        headers = {"Authorization": f"Bearer {create_access_token(self.instance_id)}"}
        try:
            response = await client.post(SYNC_PATH, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ConfigSyncError(f"Configuration sync failed: {exc}") from exc

        state.last_synced_at_ms = newest
        self.db.commit()
        logger.info("Synced %d expiration configuration(s)", len(payload["configurations"]))
        return True

    async def close(self) -> None:
        """Clean up the HTTP client if this service created it."""
        async with self._client_lock:
            if self._client is not None and self._owns_client:
                await self._client.aclose()
                self._client = None
