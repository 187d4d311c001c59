"""stellar-pay - native asset payments against marketplace offers on Stellar"""

from .client import StellarPay, pay
from .types import AccountLookup, PaymentResult
from .errors import DestinationNotFoundError, PaymentVerificationError, StellarPayError, is_ambiguous_failure
from .verify import is_payment_done_for_offer

__version__ = "1.0.0"
__all__ = [
    "StellarPay",
    "pay",
    "PaymentResult",
    "AccountLookup",
    "StellarPayError",
    "DestinationNotFoundError",
    "PaymentVerificationError",
    "is_ambiguous_failure",
    "is_payment_done_for_offer",
]
