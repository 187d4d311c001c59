from dataclasses import dataclass, field
from typing import Any, Literal

from stellar_sdk import Account, TransactionEnvelope

from .errors import is_ambiguous_failure

NetworkType = Literal["testnet", "public"]
LookupStatus = Literal["found", "not_found", "transient", "invalid"]


@dataclass
class AccountLookup:
    account_id: str
    status: LookupStatus
    account: Account | None = None
    error: Exception | None = None

    @property
    def found(self) -> bool:
        return self.status == "found"


@dataclass
class PaymentResult:
    success: bool
    tx_hash: str | None = None
    error: Exception | None = None
    payer: str = ""
    recipient: str = ""
    amount: str = ""
    reference: str = ""
    transaction: TransactionEnvelope | None = None
    response: dict[str, Any] | None = field(default=None, repr=False)

    @property
    def ambiguous(self) -> bool:
        """True when the payment may or may not have been applied."""
        return self.error is not None and is_ambiguous_failure(self.error)
