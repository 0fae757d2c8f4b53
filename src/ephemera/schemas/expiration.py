# src/ephemera/schemas/expiration.py
"""Disappearing-message settings Pydantic schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from ephemera.expiry.mode import ExpirationType, ExpiryMode
from ephemera.expiry.options import CardModel, OptionAction, OptionModel, UiState
from ephemera.expiry.state import SettingsState
from ephemera.expiry.wire import to_wire


class ExpiryModeSchema(BaseModel):
    """Expiry mode with its wire representation."""

    type: ExpirationType
    seconds: int = Field(0, description="Timer duration; 0 when messages never disappear")
    expiration_timer: int = Field(..., description="Wire timer field")
    expiration_type: str = Field(..., description="Wire expiration type name")

    @classmethod
    def from_mode(cls, mode: ExpiryMode) -> ExpiryModeSchema:
        timer, wire_type = to_wire(mode)
        return cls(
            type=mode.type,
            seconds=mode.expiry_seconds,
            expiration_timer=timer,
            expiration_type=wire_type.name,
        )


class ExpiryEdit(BaseModel):
    """One edit applied to the working settings, in request order."""

    action: Literal["set_type", "set_time", "set_mode"]
    type: ExpirationType | None = None
    seconds: int | None = None

    @model_validator(mode="after")
    def _check_arguments(self) -> ExpiryEdit:
        if self.action == "set_type" and self.type is None:
            raise ValueError("set_type requires 'type'")
        if self.action == "set_time" and self.seconds is None:
            raise ValueError("set_time requires 'seconds'")
        if self.action == "set_mode" and self.type is None:
            raise ValueError("set_mode requires 'type'")
        return self

    def to_action(self) -> OptionAction:
        """Return the option action this edit selects."""
        return OptionAction(self.action, expiration_type=self.type, seconds=self.seconds)


class ExpiryEditRequest(BaseModel):
    """Schema for previewing or committing settings edits."""

    edits: list[ExpiryEdit] = Field(default_factory=list)


class OptionActionSchema(BaseModel):
    name: str
    type: ExpirationType | None = None
    seconds: int | None = None


class OptionSchema(BaseModel):
    title: str
    subtitle: str | None = None
    selected: bool
    enabled: bool
    action: OptionActionSchema

    @classmethod
    def from_option(cls, option: OptionModel) -> OptionSchema:
        return cls(
            title=option.title,
            subtitle=option.subtitle,
            selected=option.selected,
            enabled=option.enabled,
            action=OptionActionSchema(
                name=option.action.name,
                type=option.action.expiration_type,
                seconds=option.action.seconds,
            ),
        )


class CardSchema(BaseModel):
    title: str
    options: list[OptionSchema]

    @classmethod
    def from_card(cls, card: CardModel) -> CardSchema:
        return cls(title=card.title, options=[OptionSchema.from_option(o) for o in card.options])


class ExpirationSettingsResponse(BaseModel):
    """Schema for a thread's settings screen returned by the API."""

    thread_id: int
    is_group: bool
    is_self_admin: bool
    is_note_to_self: bool
    is_new_config_enabled: bool
    expiry_mode: ExpiryModeSchema
    persisted_mode: ExpiryModeSchema
    subtitle: str
    show_group_footer: bool
    cards: list[CardSchema]

    @classmethod
    def build(cls, thread_id: int, state: SettingsState, ui: UiState) -> ExpirationSettingsResponse:
        return cls(
            thread_id=thread_id,
            is_group=state.is_group,
            is_self_admin=state.is_self_admin,
            is_note_to_self=state.is_note_to_self,
            is_new_config_enabled=state.is_new_config_enabled,
            expiry_mode=ExpiryModeSchema.from_mode(state.expiry_mode or ExpiryMode.NONE),
            persisted_mode=ExpiryModeSchema.from_mode(state.persisted_mode or ExpiryMode.NONE),
            subtitle=ui.subtitle,
            show_group_footer=ui.show_group_footer,
            cards=[CardSchema.from_card(card) for card in ui.cards],
        )


class ExpirationCommitResponse(BaseModel):
    """Schema returned after a successful commit."""

    status: Literal["success"] = "success"
    thread_id: int
    expiry_mode: ExpiryModeSchema
    updated_at_ms: int
