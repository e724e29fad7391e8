"""Who may do what on a booking dossier."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass

from villa_booking.domain.errors import PermissionDenied


@dataclass(frozen=True, slots=True)
class Caller:
    """The party behind a request: an admin, or whoever holds the token."""

    is_admin: bool = False
    identity: uuid.UUID | str | None = None

    @classmethod
    def anonymous(cls) -> Caller:
        return cls()


class DossierAction(str, enum.Enum):
    VIEW = "view"
    UPLOAD_SIGNED_CONTRACT = "upload_signed_contract"
    SUBMIT_REVIEW = "submit_review"
    SHARE_LINK = "share_link"
    CHANGE_STATUS = "change_status"
    EDIT_DATES = "edit_dates"
    UPLOAD_CONTRACT = "upload_contract"
    EDIT_PAYMENT_NOTES = "edit_payment_notes"
    TOGGLE_GATE = "toggle_gate"
    VIEW_SIGNED_CONTRACT = "view_signed_contract"
    DELETE = "delete"


TOKEN_HOLDER_ACTIONS = frozenset(
    {
        DossierAction.VIEW,
        DossierAction.UPLOAD_SIGNED_CONTRACT,
        DossierAction.SUBMIT_REVIEW,
        DossierAction.SHARE_LINK,
    }
)

ADMIN_ONLY_FIELDS = frozenset({"payment_notes", "guest_signed_contract_file_path"})


def can(caller: Caller, action: DossierAction, *, holds_token: bool = False) -> bool:
    if caller.is_admin:
        return True
    return holds_token and action in TOKEN_HOLDER_ACTIONS


def require(caller: Caller, action: DossierAction, *, holds_token: bool = False) -> None:
    if not can(caller, action, holds_token=holds_token):
        raise PermissionDenied(action.value.replace("_", " "))


def allowed_actions(caller: Caller, *, holds_token: bool = False) -> list[DossierAction]:
    return [action for action in DossierAction if can(caller, action, holds_token=holds_token)]


def visible_fields(caller: Caller, fields: set[str] | frozenset[str]) -> set[str]:
    """Drop back-office-only fields for anyone but an admin."""
    if caller.is_admin:
        return set(fields)
    return set(fields) - ADMIN_ONLY_FIELDS
