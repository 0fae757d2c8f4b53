# src/ephemera/api/v1/endpoints/threads.py
"""Disappearing-message settings endpoints for the Ephemera API."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ephemera.api.v1.dependencies import CurrentUserDep, SessionDep
from ephemera.core.settings import settings
from ephemera.db.time import now_ms
from ephemera.expiry.errors import OptionDisabledError, OptionNotOfferedError
from ephemera.expiry.state import Event, ExpirationSettings
from ephemera.models import Thread
from ephemera.schemas.expiration import (
    ExpirationCommitResponse,
    ExpirationSettingsResponse,
    ExpiryEdit,
    ExpiryEditRequest,
    ExpiryModeSchema,
)
from ephemera.services import (
    ConfigSyncService,
    OutboxMessageSender,
    SqlConfigurationStore,
    SqlGroupLookup,
    SqlRecipientLookup,
    StaticIdentity,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["expiration"])


def get_config_sync_service(db: SessionDep) -> ConfigSyncService:
    """Return the configuration sync service for this request."""
    return ConfigSyncService(db)


ConfigSyncDep = Annotated[ConfigSyncService, Depends(get_config_sync_service)]


async def _load_settings(
    thread_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
    config_sync: ConfigSyncDep,
) -> ExpirationSettings:
    if db.get(Thread, thread_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found",
        )

    expiration_settings = ExpirationSettings(
        thread_id,
        store=SqlConfigurationStore(db),
        recipients=SqlRecipientLookup(db),
        groups=SqlGroupLookup(db),
        identity=StaticIdentity(current_user.address),
        sender=OutboxMessageSender(db),
        config_sync=config_sync,
        is_new_config_enabled=settings.new_config_enabled,
        clock=now_ms,
    )
    await expiration_settings.initialize()
    return expiration_settings


ExpirationSettingsDep = Annotated[ExpirationSettings, Depends(_load_settings)]


def _apply_edits(expiration_settings: ExpirationSettings, edits: list[ExpiryEdit]) -> None:
    """Select each edit's option in order; each must be offered and enabled at that point."""
    for index, edit in enumerate(edits):
        try:
            expiration_settings.select(edit.to_action(), debug=settings.show_debug_times)
        except OptionNotOfferedError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Edit {index} is not an available option: {exc}",
            ) from exc
        except OptionDisabledError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Edit {index} selects a disabled option: {exc}",
            ) from exc


def _render(expiration_settings: ExpirationSettings) -> ExpirationSettingsResponse:
    return ExpirationSettingsResponse.build(
        expiration_settings.thread_id,
        expiration_settings.state,
        expiration_settings.ui_state(settings.show_debug_times),
    )


@router.get("/{thread_id}/expiration", response_model=ExpirationSettingsResponse)
async def get_expiration_settings(
    expiration_settings: ExpirationSettingsDep,
) -> ExpirationSettingsResponse:
    """Get the current disappearing-messages settings and selectable options."""
    return _render(expiration_settings)


@router.post("/{thread_id}/expiration/preview", response_model=ExpirationSettingsResponse)
async def preview_expiration_settings(
    payload: ExpiryEditRequest,
    expiration_settings: ExpirationSettingsDep,
) -> ExpirationSettingsResponse:
    """Apply edits without saving and return the resulting options."""
    _apply_edits(expiration_settings, payload.edits)
    return _render(expiration_settings)


@router.put("/{thread_id}/expiration", response_model=ExpirationCommitResponse)
async def update_expiration_settings(
    payload: ExpiryEditRequest,
    expiration_settings: ExpirationSettingsDep,
    config_sync: ConfigSyncDep,
) -> ExpirationCommitResponse:
    """Apply edits, save the result and announce it to the thread."""
    state = expiration_settings.state
    if state.is_group and not state.is_self_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only group admins can change disappearing messages",
        )

    _apply_edits(expiration_settings, payload.edits)
    try:
        event = await expiration_settings.commit()
    finally:
        await config_sync.close()

    configuration = expiration_settings.configuration
    if event is Event.FAIL or configuration is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not update disappearing messages setting",
        )

    return ExpirationCommitResponse(
        thread_id=expiration_settings.thread_id,
        expiry_mode=ExpiryModeSchema.from_mode(configuration.expiry_mode),
        updated_at_ms=configuration.updated_at_ms,
    )
