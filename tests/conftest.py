"""Pytest fixtures for testing"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from eth_abi import encode
from web3 import Web3

from scorechain.schemas.schemas import BorrowerInput
from scorechain.services.chain_connector import ChainConnector, read_abi_file
from scorechain.utils.config import Config
from scorechain.utils.errors import Ok

# Well-known development key (Hardhat/Anvil account #0), never funded on a real network
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT_ADDRESS = "0x04Dd1eBa17E0d633feB0767439EF4cF1A722fc57"
RPC_URL = "http://127.0.0.1:8545"
CHAIN_ID = 11155111

STORED_BORROWER = ("123", "Alice", 85, 90, 70, 95, 80, 75, 82)
DEFAULT_BORROWER = ("", "", 0, 0, 0, 0, 0, 0, 0)

BORROWER_TUPLE_TYPE = "(string,string,uint256,uint256,uint256,uint256,uint256,uint256,uint256)"
WRITE_ARG_TYPES = ["string", "string"] + ["uint256"] * 6


@pytest.fixture
def abi_source() -> str:
    """Bundled CreditScore ABI document"""
    return read_abi_file(Config.CREDIT_SCORE_ABI_PATH)


@pytest.fixture
def connector(abi_source: str) -> ChainConnector:
    """Real connector; nothing is sent to the endpoint"""
    result = ChainConnector.initialize(
        rpc_url=RPC_URL,
        private_key=TEST_PRIVATE_KEY,
        contract_address=CONTRACT_ADDRESS,
        abi_source=abi_source,
        chain_id=CHAIN_ID,
    )
    assert isinstance(result, Ok)
    return result.value


@pytest.fixture
def borrower() -> BorrowerInput:
    return BorrowerInput(
        nid="123",
        name="Alice",
        account_balance_score=85,
        payment_history_score=90,
        total_transactions_score=70,
        total_remaining_loan_score=95,
        credit_age_score=80,
        professional_risk_factor_score=75,
    )


def _built_transaction(params):
    """What build_transaction returns once the node filled in gas and fees"""
    return {
        'from': params['from'],
        'to': CONTRACT_ADDRESS,
        'data': '0x7a9b3c1d',
        'value': 0,
        'gas': 300000,
        'gasPrice': 2_000_000_000,
        'nonce': params['nonce'],
        'chainId': params['chainId'],
    }


@pytest.fixture
def fake_chain():
    """Network-facing pieces of web3, replaced with mocks"""
    nonces = iter(range(7, 100))

    def send_raw_transaction(raw):
        return Web3.keccak(raw)

    write_call = SimpleNamespace(build_transaction=AsyncMock(side_effect=_built_transaction))
    read_call = SimpleNamespace(call=AsyncMock(return_value=(STORED_BORROWER,)))

    return SimpleNamespace(
        eth=SimpleNamespace(
            get_transaction_count=AsyncMock(side_effect=lambda address, block: next(nonces)),
            send_raw_transaction=AsyncMock(side_effect=send_raw_transaction),
        ),
        is_connected=AsyncMock(return_value=True),
        write_call=write_call,
        read_call=read_call,
    )


@pytest.fixture
def fake_connector(connector: ChainConnector, fake_chain) -> ChainConnector:
    """Connector with the real signer and mocked RPC"""
    handle = SimpleNamespace(
        address=connector.handle.address,
        add_or_update_borrower=MagicMock(return_value=fake_chain.write_call),
        get_borrower_details=MagicMock(return_value=fake_chain.read_call),
    )
    return ChainConnector(fake_chain, connector.account, handle, CHAIN_ID)


class FakeRpcNode:
    """Answers JSON-RPC requests like a node hosting the CreditScore contract"""

    canned = {
        'eth_getTransactionCount': '0x3',
        'eth_estimateGas': '0x30d40',
        'eth_chainId': hex(CHAIN_ID),
        'eth_gasPrice': '0x3b9aca00',
        'eth_maxPriorityFeePerGas': '0x3b9aca00',
        'eth_getBlockByNumber': {
            'number': '0x10',
            'hash': '0x' + '11' * 32,
            'parentHash': '0x' + '22' * 32,
            'baseFeePerGas': '0x3b9aca00',
            'gasLimit': '0x1c9c380',
            'gasUsed': '0x0',
            'timestamp': '0x6553f100',
            'transactions': [],
        },
    }

    def __init__(self, borrower=STORED_BORROWER):
        self.borrower = borrower
        self.requests = []
        self.raw_transactions = []

    async def make_request(self, method, params):
        self.requests.append((method, params))
        response = {'jsonrpc': '2.0', 'id': len(self.requests)}

        if method == 'eth_call':
            response['result'] = Web3.to_hex(encode([BORROWER_TUPLE_TYPE], [self.borrower]))
        elif method == 'eth_sendRawTransaction':
            raw = params[0]
            if isinstance(raw, str):
                raw = Web3.to_bytes(hexstr=raw)
            self.raw_transactions.append(bytes(raw))
            response['result'] = Web3.to_hex(Web3.keccak(raw))
        elif method in self.canned:
            response['result'] = self.canned[method]
        else:
            response['error'] = {'code': -32601, 'message': f'the method {method} does not exist'}
        return response

    def params_for(self, method):
        return [params for name, params in self.requests if name == method]


@pytest.fixture
def rpc_node(connector: ChainConnector, monkeypatch) -> FakeRpcNode:
    """Real connector and contract handle; only the HTTP round trip is replaced"""
    node = FakeRpcNode()
    monkeypatch.setattr(connector.w3.provider, "make_request", node.make_request)
    return node
