"""
Shared fixtures: real keypairs and accounts, a mocked Horizon server.
"""
from unittest.mock import MagicMock

import pytest
from stellar_sdk import Account, Keypair
from stellar_sdk.client.response import Response
from stellar_sdk.exceptions import BadRequestError, NotFoundError

from stellar_pay import StellarPay


def horizon_response(status_code: int, body: str = "{}") -> Response:
    return Response(status_code=status_code, text=body, headers={}, url="https://horizon-testnet.stellar.org")


def not_found_error() -> NotFoundError:
    return NotFoundError(horizon_response(404, '{"title": "Resource Missing", "status": 404}'))


def bad_request_error() -> BadRequestError:
    body = '{"title": "Transaction Failed", "status": 400, "extras": {"result_codes": {"transaction": "tx_bad_seq"}}}'
    return BadRequestError(horizon_response(400, body))


@pytest.fixture
def sender() -> Keypair:
    return Keypair.random()


@pytest.fixture
def destination() -> Keypair:
    return Keypair.random()


@pytest.fixture
def mock_server(sender, destination):
    """Horizon stand-in: both accounts exist, submissions succeed."""
    server = MagicMock()
    sequences = {sender.public_key: 100}

    def load_account(account_id):
        if account_id in sequences:
            account = Account(account_id, sequences[account_id])
            # Each accepted transaction consumes one sequence number
            sequences[account_id] += 1
            return account
        if account_id == destination.public_key:
            return Account(account_id, 5)
        raise not_found_error()

    server.load_account.side_effect = load_account
    server.submit_transaction.side_effect = lambda envelope: {
        "hash": envelope.hash_hex(),
        "successful": True,
        "ledger": 123,
    }
    return server


@pytest.fixture
def client(mock_server) -> StellarPay:
    return StellarPay(network="testnet", server=mock_server)
