import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.middleware import ExtraDataToPOAMiddleware

from scorechain.schemas.schemas import BorrowerInput
from scorechain.utils.errors import (
    AbiResolutionError,
    Err,
    InitError,
    InvalidContractAddress,
    InvalidCredential,
    Ok,
    Result,
)

logger = logging.getLogger(__name__)

AbiSource = Union[str, List[Dict[str, Any]], Dict[str, Any]]


def read_abi_file(path: str) -> str:
    """Read an ABI document from disk"""
    try:
        with open(path) as f:
            return f.read()
    except OSError as e:
        raise AbiResolutionError(f"Cannot read ABI file {path}: {e}", cause=e) from e


def parse_abi(source: AbiSource) -> List[Dict[str, Any]]:
    """Accepts JSON text, a parsed ABI list, or a compiler artifact with an 'abi' key"""
    abi = source
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except json.JSONDecodeError as e:
            raise AbiResolutionError(f"ABI is not valid JSON: {e}", cause=e) from e
    if isinstance(abi, dict):
        abi = abi.get('abi')
    if not isinstance(abi, list):
        raise AbiResolutionError("ABI document must be a list of entries or contain an 'abi' list")
    return abi


class _ContractFunctionWrapper:
    """Contract function resolved once at startup with a fixed arity"""

    name = None
    arity = None

    def __init__(self, contract, abi: List[Dict[str, Any]]):
        entry = next(
            (e for e in abi if e.get('type') == 'function' and e.get('name') == self.name),
            None
        )
        if entry is None:
            raise AbiResolutionError(f"Function '{self.name}' not found in contract ABI")
        if len(entry.get('inputs', [])) != self.arity:
            raise AbiResolutionError(
                f"Function '{self.name}' takes {len(entry.get('inputs', []))} inputs, expected {self.arity}"
            )
        try:
            self._function = getattr(contract.functions, self.name)
        except Exception as e:
            raise AbiResolutionError(f"Function '{self.name}' could not be bound: {e}", cause=e) from e


class AddOrUpdateBorrowerFunction(_ContractFunctionWrapper):
    name = 'addOrUpdateBorrower'
    arity = 8

    def __call__(self, borrower: BorrowerInput):
        return self._function(*borrower.contract_args())


class GetBorrowerDetailsFunction(_ContractFunctionWrapper):
    name = 'getBorrowerDetails'
    arity = 1

    def __call__(self, nid: str):
        return self._function(nid)


@dataclass(frozen=True)
class ContractHandle:
    address: str
    abi: List[Dict[str, Any]]
    contract: Any
    add_or_update_borrower: AddOrUpdateBorrowerFunction
    get_borrower_details: GetBorrowerDetailsFunction


class ChainConnector:
    """Endpoint, signer and CreditScore contract handle.

    Read-only after construction, so any number of in-flight writes and
    reads can share one instance.
    """

    def __init__(self, w3, account: LocalAccount, handle: ContractHandle, chain_id: int):
        self.w3 = w3
        self.account = account
        self.handle = handle
        self.chain_id = chain_id

    @classmethod
    def initialize(
        cls,
        rpc_url: str,
        private_key: str,
        contract_address: str,
        abi_source: AbiSource,
        chain_id: int,
        inject_poa: bool = False,
    ) -> Result['ChainConnector', InitError]:
        """Validate credential and ABI, then build the client.

        The endpoint is not contacted; reachability shows up on the first
        call or transaction.
        """
        # Credential first: nothing else is resolved with a bad key
        if not private_key:
            return Err(InvalidCredential("Private key is not configured"))
        try:
            account = Account.from_key(private_key)
        except Exception as e:
            logger.error("Invalid signing key", extra={"error_type": type(e).__name__})
            return Err(InvalidCredential(f"Private key is not a valid signing key: {e}", cause=e))

        try:
            abi = parse_abi(abi_source)
        except AbiResolutionError as e:
            return Err(e)

        try:
            address = Web3.to_checksum_address(contract_address)
        except (ValueError, TypeError) as e:
            return Err(InvalidContractAddress(f"Invalid contract address {contract_address!r}: {e}", cause=e))

        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        if inject_poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        try:
            contract = w3.eth.contract(address=address, abi=abi)
            handle = ContractHandle(
                address=address,
                abi=abi,
                contract=contract,
                add_or_update_borrower=AddOrUpdateBorrowerFunction(contract, abi),
                get_borrower_details=GetBorrowerDetailsFunction(contract, abi),
            )
        except AbiResolutionError as e:
            return Err(e)
        except Exception as e:
            return Err(AbiResolutionError(f"Contract ABI rejected: {e}", cause=e))

        logger.info(
            "Chain connector ready",
            extra={"agent_address": account.address, "contract_address": address, "chain_id": chain_id}
        )
        return Ok(cls(w3, account, handle, chain_id))

    async def is_connected(self) -> bool:
        try:
            return await self.w3.is_connected()
        except Exception as e:
            logger.warning("Connectivity check failed: %s", e)
            return False
