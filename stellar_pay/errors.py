"""Errors raised by stellar-pay itself.

Failures coming from Horizon or the transport layer are not wrapped: they
reach the caller as the ``stellar_sdk.exceptions`` instance that was raised.
"""

from stellar_sdk.exceptions import BaseHorizonError
from stellar_sdk.exceptions import ConnectionError as HorizonConnectionError


class StellarPayError(Exception):
    """Base class for stellar-pay errors."""
    pass


class DestinationNotFoundError(StellarPayError):
    """Raised when the destination account does not exist on the network."""

    def __init__(self, destination_id: str, message: str = "The destination account does not exist!"):
        super().__init__(message)
        self.destination_id = destination_id


class PaymentVerificationError(StellarPayError):
    """Raised when Horizon cannot return the details of a payment."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def is_ambiguous_failure(error: Exception) -> bool:
    """
    Tell whether a submission failure leaves the transaction outcome unknown.

    Transport errors and Horizon timeouts (HTTP 504) qualify: the signed
    envelope may already be in the ledger, so the safe retry is to resubmit
    that same envelope rather than build a new one.
    """
    if isinstance(error, HorizonConnectionError):
        return True
    if isinstance(error, BaseHorizonError):
        return error.status == 504
    return False
