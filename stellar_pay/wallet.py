from decimal import Decimal

from stellar_sdk import Account, Asset, Keypair, TransactionBuilder, TransactionEnvelope


def load_keypair(keypair: Keypair | str) -> Keypair:
    """Accept a signing Keypair or a secret seed ("S...")."""
    if isinstance(keypair, Keypair):
        return keypair
    return Keypair.from_secret(keypair)


def build_payment(
    source_account: Account,
    destination_id: str,
    amount: str | Decimal,
    reference: str,
    network_passphrase: str,
    base_fee: int = 100,
    timeout_seconds: int | None = None,
) -> TransactionEnvelope:
    """Build an unsigned native payment carrying ``reference`` as a text memo"""

    builder = TransactionBuilder(
        source_account=source_account,
        network_passphrase=network_passphrase,
        base_fee=base_fee,
    )
    builder.append_payment_op(
        destination=destination_id,
        asset=Asset.native(),
        amount=str(amount),
    )
    builder.add_text_memo(reference)

    if timeout_seconds:
        builder.set_timeout(timeout_seconds)
    else:
        # No expiry: the signed envelope stays valid for resubmission
        builder.add_time_bounds(0, 0)

    return builder.build()


def sign_payment(envelope: TransactionEnvelope, keypair: Keypair) -> TransactionEnvelope:
    if not keypair.can_sign():
        raise ValueError(f"Keypair {keypair.public_key} has no secret key and cannot sign")
    envelope.sign(keypair)
    return envelope
