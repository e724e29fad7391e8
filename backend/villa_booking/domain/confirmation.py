"""Two-step confirmation for destructive back-office actions.

The first request arms a confirmation for ``(identity, action, target)``;
repeating the identical request commits. Changing the fingerprint (the draft
status or the delete reason) or letting the entry expire disarms it.
"""

from __future__ import annotations

import datetime
import enum
import threading
from collections.abc import Hashable
from dataclasses import dataclass

from villa_booking.domain.errors import ConfirmationRequired


class DestructiveAction(str, enum.Enum):
    CANCEL = "cancel"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ConfirmationArmed:
    """A pending confirmation waiting for its repeat."""

    action: DestructiveAction
    target: str
    fingerprint: str
    armed_at: datetime.datetime

    def matches(self, action: DestructiveAction, target: str, fingerprint: str) -> bool:
        return (
            self.action is action
            and self.target == target
            and self.fingerprint == fingerprint
        )


class ConfirmationLedger:
    """In-process store of armed confirmations keyed by caller identity."""

    def __init__(self, ttl: datetime.timedelta = datetime.timedelta(minutes=5)) -> None:
        self.ttl = ttl
        self._armed: dict[Hashable, ConfirmationArmed] = {}
        self._lock = threading.Lock()

    def check(
        self,
        identity: Hashable,
        action: DestructiveAction,
        target: str,
        fingerprint: str = "",
        *,
        now: datetime.datetime | None = None,
    ) -> None:
        """Arm on first call and raise; return quietly on a matching repeat."""
        now = now or datetime.datetime.now(datetime.UTC)
        with self._lock:
            armed = self._armed.get(identity)
            if (
                armed is not None
                and now - armed.armed_at <= self.ttl
                and armed.matches(action, target, fingerprint)
            ):
                del self._armed[identity]
                return
            self._armed[identity] = ConfirmationArmed(
                action=action, target=target, fingerprint=fingerprint, armed_at=now
            )
        raise ConfirmationRequired(action.value)

    def disarm(self, identity: Hashable) -> None:
        with self._lock:
            self._armed.pop(identity, None)

    def armed_for(self, identity: Hashable) -> ConfirmationArmed | None:
        with self._lock:
            return self._armed.get(identity)

    def clear(self) -> None:
        with self._lock:
            self._armed.clear()
