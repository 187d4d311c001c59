import logging
import os
from decimal import Decimal

from stellar_sdk import Keypair, Network, Server, TransactionEnvelope
from stellar_sdk.exceptions import BaseRequestError, NotFoundError, SdkError

from .errors import DestinationNotFoundError
from .types import AccountLookup, NetworkType, PaymentResult
from .verify import HORIZON_URLS, is_payment_done_for_offer
from .wallet import build_payment, load_keypair, sign_payment

logger = logging.getLogger(__name__)


class StellarPay:
    NETWORKS = {
        "testnet": {
            "horizon_url": HORIZON_URLS["testnet"],
            "passphrase": Network.TESTNET_NETWORK_PASSPHRASE,
        },
        "public": {
            "horizon_url": HORIZON_URLS["public"],
            "passphrase": Network.PUBLIC_NETWORK_PASSPHRASE,
        },
    }

    def __init__(
        self,
        network: NetworkType = "testnet",
        horizon_url: str | None = None,
        base_fee: int = 100,
        timeout_seconds: int | None = None,
        server: Server | None = None,
        debug: bool = False
    ):
        if network not in self.NETWORKS:
            raise ValueError(f"Unknown network {network!r}, expected one of {list(self.NETWORKS)}")

        self.network = network
        self.horizon_url = (horizon_url or self.NETWORKS[network]["horizon_url"]).rstrip("/")
        self.network_passphrase = self.NETWORKS[network]["passphrase"]
        self.base_fee = base_fee
        self.timeout_seconds = timeout_seconds
        self.server = server or Server(horizon_url=self.horizon_url)
        self.debug = debug

    def lookup_account(self, account_id: str) -> AccountLookup:
        """Resolve an account into a found / not_found / transient / invalid result.

        ``transient`` covers network and Horizon failures, ``invalid`` local
        SDK errors such as a malformed account id.
        """
        try:
            account = self.server.load_account(account_id)
        except NotFoundError as e:
            return AccountLookup(account_id, "not_found", error=e)
        except BaseRequestError as e:
            return AccountLookup(account_id, "transient", error=e)
        except SdkError as e:
            return AccountLookup(account_id, "invalid", error=e)
        return AccountLookup(account_id, "found", account=account)

    def build_payment(
        self,
        destination_id: str,
        keypair: Keypair | str,
        amount: str | Decimal,
        reference: str
    ) -> TransactionEnvelope:
        """
        Check the destination, load the sender and return a signed payment.

        Nothing is submitted. Raises DestinationNotFoundError when the
        destination does not exist; any other lookup failure is re-raised
        as it came from the network.
        """
        keypair = self._load_keypair(keypair)

        # Checked first so a missing destination never costs a fee
        destination = self.lookup_account(destination_id)
        if destination.status == "not_found":
            logger.error(f"Destination account {destination_id} does not exist")
            raise DestinationNotFoundError(destination_id) from destination.error
        if not destination.found:
            logger.error(f"Could not resolve destination {destination_id}: {destination.error}")
            raise destination.error

        sender = self.lookup_account(keypair.public_key)
        if not sender.found:
            logger.error(f"Could not load sender account {keypair.public_key}: {sender.error}")
            raise sender.error

        try:
            envelope = self.build_transaction(sender.account, destination_id, amount, reference)
        except Exception as e:
            logger.error(f"Could not build payment of {amount} to {destination_id}: {e!r}")
            raise

        try:
            envelope = self.sign_transaction(envelope, keypair)
        except Exception as e:
            logger.error(f"Could not sign payment with {keypair.public_key}: {e!r}")
            raise

        if self.debug:
            logger.debug(f"Signed payment XDR: {envelope.to_xdr()}")

        return envelope

    def _load_keypair(self, keypair: Keypair | str) -> Keypair:
        try:
            return load_keypair(keypair)
        except Exception as e:
            logger.error(f"Invalid sender keypair: {e!r}")
            raise

    def build_transaction(self, source_account, destination_id, amount, reference) -> TransactionEnvelope:
        return build_payment(
            source_account=source_account,
            destination_id=destination_id,
            amount=amount,
            reference=reference,
            network_passphrase=self.network_passphrase,
            base_fee=self.base_fee,
            timeout_seconds=self.timeout_seconds,
        )

    def sign_transaction(self, envelope: TransactionEnvelope, keypair: Keypair) -> TransactionEnvelope:
        return sign_payment(envelope, keypair)

    def submit(self, envelope: TransactionEnvelope) -> dict:
        """Submit a signed envelope once and return the raw Horizon response."""
        tx_hash = envelope.hash_hex()
        logger.info(f"Submitting transaction {tx_hash}")

        try:
            response = self.server.submit_transaction(envelope)
        except Exception as e:
            logger.error(f"Something went wrong submitting {tx_hash}: {e!r}")
            raise

        if self.debug:
            logger.debug(f"Submit response: {response}")

        logger.info(f"Transaction {tx_hash} accepted")
        return response

    def submit_payment(
        self,
        destination_id: str,
        keypair: Keypair | str,
        amount: str | Decimal,
        reference: str
    ) -> PaymentResult:
        """
        Pay ``amount`` of the native asset to ``destination_id``.

        Checks the destination, loads the sender's current sequence, builds a
        single payment with ``reference`` as text memo, signs it and submits
        it exactly once. Failures are raised unmodified; nothing is retried.

        Args:
            destination_id: Public key of the receiver (the seller)
            keypair: Sender Keypair or secret seed
            amount: Amount in native units (e.g. "100")
            reference: Offer id the payment settles, stored as the memo

        Returns:
            PaymentResult with success=True, tx_hash, transaction and response
        """
        envelope = self.build_payment(destination_id, keypair, amount, reference)
        response = self.submit(envelope)

        return PaymentResult(
            success=True,
            tx_hash=response.get("hash", envelope.hash_hex()),
            payer=envelope.transaction.source.account_id,
            recipient=destination_id,
            amount=str(amount),
            reference=reference,
            transaction=envelope,
            response=response
        )

    def pay(
        self,
        destination_id: str,
        keypair: Keypair | str,
        amount: str | Decimal,
        reference: str
    ) -> PaymentResult:
        """
        Same as submit_payment, but failures come back as a PaymentResult.

        When the failure happened after signing, ``result.transaction`` holds
        the signed envelope; if ``result.ambiguous`` is set it can be passed
        to resubmit().
        """
        result = PaymentResult(
            success=False,
            recipient=destination_id,
            amount=str(amount),
            reference=reference
        )

        try:
            keypair = self._load_keypair(keypair)
            result.payer = keypair.public_key
            result.transaction = self.build_payment(destination_id, keypair, amount, reference)
            result.response = self.submit(result.transaction)
        except Exception as e:
            logger.error(f"Payment of {amount} to {destination_id} for {reference} failed: {e!r}")
            result.error = e
            if result.transaction is not None:
                result.tx_hash = result.transaction.hash_hex()
            return result

        result.success = True
        result.tx_hash = result.response.get("hash", result.transaction.hash_hex())
        return result

    def resubmit(self, envelope: TransactionEnvelope) -> PaymentResult:
        """
        Submit an already-signed envelope again, once.

        Safe after an ambiguous failure: the sequence number is fixed in the
        envelope, so the network applies it at most once.
        """
        logger.warning(f"Resubmitting transaction {envelope.hash_hex()}")
        response = self.submit(envelope)

        return PaymentResult(
            success=True,
            tx_hash=response.get("hash", envelope.hash_hex()),
            transaction=envelope,
            response=response
        )

    def verify_payment(
        self,
        transaction_hash: str,
        destination_id: str,
        amount: str | Decimal,
        offer_id: str
    ) -> bool:
        """
        Check that a submitted transaction paid ``amount`` to ``destination_id`` for ``offer_id``.

        Example:
            result = client.submit_payment("GSELLER...", keys, "200", "offer-42")
            assert client.verify_payment(result.tx_hash, "GSELLER...", "200", "offer-42")
        """
        return is_payment_done_for_offer(
            transaction_hash=transaction_hash,
            destination_id=destination_id,
            amount=amount,
            offer_id=offer_id,
            horizon_url=self.horizon_url
        )


# Factory function for one-line usage
def pay(
    destination_id: str,
    amount: str | Decimal,
    reference: str,
    keypair: Keypair | str | None = None,
    network: NetworkType = "testnet",
    horizon_url: str | None = None,
    debug: bool = False
) -> PaymentResult:
    """
    One-line native payment.

    Reads the sender secret seed from STELLAR_SECRET_KEY when no keypair
    is given. Never raises: inspect ``result.success`` and ``result.error``.

    Usage:
        from stellar_pay import pay

        result = pay("GSELLER...", amount="200", reference="offer-42")
        if not result.success and result.ambiguous:
            StellarPay().resubmit(result.transaction)
    """
    if keypair is None:
        keypair = os.environ.get("STELLAR_SECRET_KEY")
        if not keypair:
            return PaymentResult(
                success=False,
                error=ValueError("STELLAR_SECRET_KEY environment variable not set"),
                recipient=destination_id,
                amount=str(amount),
                reference=reference
            )

    client = StellarPay(network=network, horizon_url=horizon_url, debug=debug)
    return client.pay(destination_id, keypair, amount, reference)
