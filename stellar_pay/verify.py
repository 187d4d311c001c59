"""Offer payment verification against Horizon"""

import logging
from decimal import Decimal, InvalidOperation

import requests

from .errors import PaymentVerificationError

logger = logging.getLogger(__name__)

HORIZON_URLS = {
    "testnet": "https://horizon-testnet.stellar.org",
    "public": "https://horizon.stellar.org",
}


def fetch_transaction(
    transaction_hash: str,
    horizon_url: str = HORIZON_URLS["testnet"],
    timeout: int = 30
) -> dict:
    """
    Fetch a transaction record (memo, memo_type, successful, ...).

    Args:
        transaction_hash: Hex hash of the ledger transaction
        horizon_url: Horizon base URL
        timeout: HTTP timeout in seconds

    Returns:
        Horizon transaction JSON
    """
    url = f"{horizon_url.rstrip('/')}/transactions/{transaction_hash}"
    response = requests.get(url, timeout=timeout)

    if response.status_code != 200:
        logger.error(f"Transaction lookup failed for {transaction_hash}: HTTP {response.status_code}")
        raise PaymentVerificationError(
            f"Error getting transaction details from Horizon: HTTP {response.status_code} - {response.text}",
            status_code=response.status_code
        )

    return _decode(response, transaction_hash)


def fetch_first_payment(
    transaction_hash: str,
    horizon_url: str = HORIZON_URLS["testnet"],
    timeout: int = 30
) -> dict:
    """
    Fetch the first payment operation of a transaction.

    Returns:
        Horizon payment record (type, from, to, amount, asset_type, ...)
    """
    url = f"{horizon_url.rstrip('/')}/transactions/{transaction_hash}/payments"
    response = requests.get(url, params={"limit": 1}, timeout=timeout)

    if response.status_code != 200:
        logger.error(f"Payment lookup failed for {transaction_hash}: HTTP {response.status_code}")
        raise PaymentVerificationError(
            f"Error getting payment details from Horizon: HTTP {response.status_code} - {response.text}",
            status_code=response.status_code
        )

    records = _decode(response, transaction_hash).get("_embedded", {}).get("records", [])
    if not records:
        logger.error(f"Transaction {transaction_hash} has no payment operations")
        raise PaymentVerificationError(f"Transaction {transaction_hash} has no payment operations")

    return records[0]


def _decode(response, transaction_hash: str) -> dict:
    try:
        return response.json()
    except ValueError:
        logger.error(f"Horizon returned a non-JSON body for {transaction_hash}")
        raise PaymentVerificationError(
            f"Unreadable Horizon response for {transaction_hash}: {response.text[:200]}",
            status_code=response.status_code
        )


def _same_amount(recorded: str, expected: str | Decimal) -> bool:
    try:
        return Decimal(recorded) == Decimal(str(expected))
    except InvalidOperation:
        raise PaymentVerificationError(f"Unable to parse amount in payment: {recorded!r}")


def is_payment_done_for_offer(
    transaction_hash: str,
    destination_id: str,
    amount: str | Decimal,
    offer_id: str,
    horizon_url: str = HORIZON_URLS["testnet"],
    timeout: int = 30
) -> bool:
    """
    Check that a ledger transaction settled the given offer.

    The payment must go to ``destination_id`` in the native asset for exactly
    ``amount``, and the transaction must have succeeded and carry ``offer_id``
    as its text memo.

    Args:
        transaction_hash: Hash returned when the payment was submitted
        destination_id: Expected receiver (the seller)
        amount: Expected amount in native units
        offer_id: Offer the payment was made against
        horizon_url: Horizon base URL
        timeout: HTTP timeout in seconds

    Returns:
        True if the transaction pays the offer, False otherwise

    Example:
        if is_payment_done_for_offer(tx_hash, "GSELLER...", "200", "offer-42"):
            print("Offer settled")
    """
    payment = fetch_first_payment(transaction_hash, horizon_url, timeout)
    transaction = fetch_transaction(transaction_hash, horizon_url, timeout)

    matches = (
        payment.get("to") == destination_id
        and payment.get("asset_type") == "native"
        and _same_amount(payment.get("amount", ""), amount)
        and transaction.get("successful") is True
        and transaction.get("memo_type") == "text"
        and transaction.get("memo") == offer_id
    )

    if not matches:
        logger.info(f"Transaction {transaction_hash} does not settle offer {offer_id}")
    return matches
