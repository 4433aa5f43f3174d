import logging

from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from scorechain.schemas.schemas import BorrowerRecord
from scorechain.services.borrower_writer import extract_revert_reason
from scorechain.utils.errors import (
    BorrowerNotFound,
    DecodeError,
    Err,
    InvalidInput,
    NetworkError,
    Ok,
    ReadError,
    Result,
)

logger = logging.getLogger(__name__)


class BorrowerReader:
    """Reads borrower details with a free view call"""

    def __init__(self, connector):
        self.connector = connector

    async def fetch(self, nid: str) -> Result[BorrowerRecord, ReadError]:
        """Call getBorrowerDetails(nid); every call goes to the network"""
        if not nid:
            return Err(InvalidInput("NID is required to fetch borrower details"))

        try:
            result = await self.connector.handle.get_borrower_details(nid).call()
        except ContractLogicError as e:
            reason = extract_revert_reason(e)
            logger.info("Borrower lookup reverted", extra={"nid": nid, "reason": reason})
            return Err(BorrowerNotFound(f"Lookup reverted: {reason}", cause=e))
        except BadFunctionCallOutput as e:
            logger.error("Undecodable borrower result", extra={"nid": nid, "error": str(e)})
            return Err(DecodeError(f"Could not decode contract output: {e}", cause=e))
        except Exception as e:
            logger.error("Borrower lookup failed", extra={"nid": nid, "error": str(e)})
            return Err(NetworkError(f"Contract call failed: {e}", cause=e))

        try:
            record = BorrowerRecord.from_contract_tuple(result)
        except (ValueError, TypeError) as e:
            logger.error("Unexpected borrower result shape", extra={"nid": nid, "error": str(e)})
            return Err(DecodeError(f"Unexpected borrower data: {e}", cause=e))

        # No existence flag on-chain: an empty NID means "not found"
        if record.is_unset():
            return Err(BorrowerNotFound(f"No borrower stored for NID {nid}"))

        return Ok(record)
