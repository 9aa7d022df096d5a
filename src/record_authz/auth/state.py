"""
record_authz.auth.state

Authentication-state source.

Responsibilities:
- Hold the current principal for the dev identity switcher.
- Swap identities atomically and notify subscribers of the new principal.

Callers read a snapshot via `current()` and pass it explicitly to
`Authorizer.authorize`; authorization results are never cached here.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable

from record_authz.auth.identities import get_identity
from record_authz.auth.models import ANONYMOUS, Principal
from record_authz.observability.logging import get_logger

log = get_logger(__name__)

IdentityObserver = Callable[[Principal], None]
IdentityDirectory = Callable[[str | uuid.UUID], Principal]


class AuthenticationStateProvider:
    def __init__(
        self,
        *,
        directory: IdentityDirectory = get_identity,
        initial: Principal = ANONYMOUS,
    ) -> None:
        self._directory = directory
        self._principal = initial
        self._observers: list[IdentityObserver] = []
        self._lock = threading.Lock()

    def current(self) -> Principal:
        with self._lock:
            return self._principal

    def change_identity(self, identifier: str | uuid.UUID) -> Principal:
        return self.set_principal(self._directory(identifier))

    def sign_out(self) -> Principal:
        return self.set_principal(ANONYMOUS)

    def set_principal(self, principal: Principal) -> Principal:
        with self._lock:
            self._principal = principal
            observers = list(self._observers)

        log.info(
            "identity_changed",
            identity_id=principal.identity_id or None,
            name=principal.name or None,
        )
        # Notify outside the lock so observers may call back into the provider.
        for observer in observers:
            try:
                observer(principal)
            except Exception:
                log.exception("identity_observer_failed", observer=repr(observer))
        return principal

    def subscribe(self, observer: IdentityObserver) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe


# --- Module Notes -----------------------------------------------------------
# Notification fan-out is best-effort and unordered: a failing observer is logged and
# does not stop the others or roll back the identity change.
