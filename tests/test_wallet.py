"""
Tests for keypair handling, transaction building and ambiguity classification.
"""
import pytest
from stellar_sdk import Account, Keypair, Network
from stellar_sdk.exceptions import BadRequestError, BaseHorizonError, MemoInvalidException
from stellar_sdk.exceptions import ConnectionError as HorizonConnectionError

from conftest import bad_request_error, horizon_response
from stellar_pay import DestinationNotFoundError, is_ambiguous_failure
from stellar_pay.wallet import build_payment, load_keypair, sign_payment


class TestLoadKeypair:

    def test_keypair_passthrough(self):
        keypair = Keypair.random()
        assert load_keypair(keypair) is keypair

    def test_secret_seed(self):
        keypair = Keypair.random()
        assert load_keypair(keypair.secret).public_key == keypair.public_key


class TestBuildPayment:

    def test_unsigned_and_sequenced(self):
        sender = Keypair.random()
        envelope = build_payment(
            source_account=Account(sender.public_key, 41),
            destination_id=Keypair.random().public_key,
            amount="12.5",
            reference="offer-9",
            network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
        )

        assert envelope.signatures == []
        assert envelope.transaction.sequence == 42
        assert envelope.transaction.fee == 100

    def test_memo_too_long_rejected(self):
        sender = Keypair.random()
        with pytest.raises(MemoInvalidException):
            build_payment(
                source_account=Account(sender.public_key, 1),
                destination_id=Keypair.random().public_key,
                amount="1",
                reference="x" * 29,
                network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
            )

    def test_public_only_keypair_cannot_sign(self):
        sender = Keypair.random()
        envelope = build_payment(
            source_account=Account(sender.public_key, 1),
            destination_id=Keypair.random().public_key,
            amount="1",
            reference="offer-1",
            network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
        )

        with pytest.raises(ValueError, match="cannot sign"):
            sign_payment(envelope, Keypair.from_public_key(sender.public_key))
        assert envelope.signatures == []


class TestIsAmbiguousFailure:

    def test_connection_error(self):
        assert is_ambiguous_failure(HorizonConnectionError("Read timed out")) is True

    def test_gateway_timeout(self):
        assert is_ambiguous_failure(BaseHorizonError(horizon_response(504))) is True

    def test_bad_request(self):
        error = bad_request_error()
        assert isinstance(error, BadRequestError)
        assert is_ambiguous_failure(error) is False

    def test_destination_not_found(self):
        assert is_ambiguous_failure(DestinationNotFoundError("GX")) is False
