class LedgerError(Exception):
    """Base for every failure the ledger and vault report to callers."""

    code = "ledger_error"
    status_code = 400

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class RateMustDecrease(LedgerError):
    code = "rate_must_decrease"
    status_code = 409


class InsufficientBalance(LedgerError):
    code = "insufficient_balance"
    status_code = 409


class Unauthorized(LedgerError):
    code = "unauthorized"
    status_code = 403


class ZeroDeposit(LedgerError):
    code = "zero_deposit"
    status_code = 400


class RedeemTransferFailed(LedgerError):
    code = "redeem_transfer_failed"
    status_code = 502
