from __future__ import annotations

import logging
from typing import Protocol

import httpx
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.ledger_state import get_vault_state
from app.services.principal import check_amount

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


class Custody(Protocol):
    def receive_funds(self, sender: str, amount: int) -> None: ...

    def release_funds(self, to: str, amount: int, reference: str | None = None) -> bool: ...

    def held(self) -> int: ...


class ReserveCustody:
    """Tracks the base asset the vault holds.

    A release the reserve cannot cover is refused rather than driven negative;
    this is what happens when holders redeem accrued interest that nobody has
    funded yet.
    """

    def __init__(self, s: Session):
        self.s = s

    def held(self) -> int:
        return int(get_vault_state(self.s).held_assets)

    def receive_funds(self, sender: str, amount: int) -> None:
        amount = check_amount(amount)
        st = get_vault_state(self.s)
        st.held_assets = int(st.held_assets) + amount

    def release_funds(self, to: str, amount: int, reference: str | None = None) -> bool:
        """Release `amount` to `to`; the payout itself is the last step.

        Everything pending in the session is flushed before funds leave, so a
        failing write surfaces while the release can still be abandoned.
        `reference` identifies the release to the payee side and repeats when
        a rolled-back release is retried.
        """
        amount = check_amount(amount)
        st = get_vault_state(self.s)
        held = int(st.held_assets)
        if amount > held:
            logger.warning("release of %s to %s refused: vault holds %s", amount, to, held)
            return False
        st.held_assets = held - amount
        self.s.flush()
        if not self._pay_out(to, amount, reference):
            st.held_assets = held
            return False
        return True

    def _pay_out(self, to: str, amount: int, reference: str | None) -> bool:
        return True


class PayoutCustody(ReserveCustody):
    """Reserve custody that also instructs an external payout service."""

    def __init__(
        self,
        s: Session,
        url: str,
        *,
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ):
        super().__init__(s)
        self.url = url
        self.timeout_s = timeout_s
        self._client = client

    def _post(self, client: httpx.Client, to: str, amount: int, reference: str | None) -> httpx.Response:
        headers = {IDEMPOTENCY_HEADER: reference} if reference else None
        # amounts exceed 2**53, so they travel as strings
        return client.post(self.url, json={"to": to, "amount": str(amount)}, headers=headers)

    def _pay_out(self, to: str, amount: int, reference: str | None) -> bool:
        try:
            if self._client is not None:
                r = self._post(self._client, to, amount, reference)
            else:
                with httpx.Client(timeout=self.timeout_s) as client:
                    r = self._post(client, to, amount, reference)
        except httpx.HTTPError:
            logger.exception("payout of %s to %s failed", amount, to)
            return False

        if not r.is_success:
            logger.warning("payout of %s to %s rejected: HTTP %s", amount, to, r.status_code)
            return False
        return True


def build_custody(s: Session) -> ReserveCustody:
    if settings.payout_url:
        return PayoutCustody(s, settings.payout_url, timeout_s=settings.payout_timeout_seconds)
    return ReserveCustody(s)
