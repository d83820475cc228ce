"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Request validation
  2xxx: Ledger session (identity, connection)
  3xxx: Ledger call outcome
  9xxx: System

Raw ledger/transport exceptions never reach the client; they are normalized
into one of the kinds below before leaving the session layer.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Request ---

class InvalidRequestError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid request: {detail}", 400)


# --- 2xxx: Ledger session ---

class IdentityNotFoundError(AppError):
    def __init__(self, label: str) -> None:
        super().__init__(
            2001,
            f'Identity for user "{label}" not found in wallet',
            500,
        )


class LedgerConnectionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Ledger connection failed: {detail}", 503)


# --- 3xxx: Ledger call ---

class LedgerRejectedError(AppError):
    """The contract itself returned an application error."""

    def __init__(self, tx_name: str, detail: str) -> None:
        self.tx_name = tx_name
        super().__init__(3001, f"Operation failed: {tx_name}: {detail}", 500)


class LedgerTimeoutError(AppError):
    """The call did not complete; for a submit the outcome is unknown.

    ``reason`` names how it ended when that was not a plain timeout, e.g. the
    connection dropped after a submit was sent.
    """

    def __init__(self, tx_name: str, mutating: bool, reason: str = "timed out") -> None:
        self.tx_name = tx_name
        self.mutating = mutating
        if mutating:
            message = (
                f"Ledger call {reason}: {tx_name}; "
                "the transaction may or may not have been applied"
            )
        else:
            message = f"Ledger call {reason}: {tx_name}"
        super().__init__(3002, message, 504)


class LedgerResponseError(AppError):
    def __init__(self, tx_name: str, detail: str) -> None:
        self.tx_name = tx_name
        super().__init__(3003, f"Unreadable ledger response for {tx_name}: {detail}", 502)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
