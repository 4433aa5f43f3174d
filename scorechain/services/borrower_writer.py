import logging

from web3 import Web3

from scorechain.schemas.schemas import BorrowerInput
from scorechain.utils.errors import Err, Ok, Result, SubmissionError

logger = logging.getLogger(__name__)


def extract_revert_reason(error):
    """Extract human-readable revert reason from a web3 error."""
    msg = getattr(error, 'message', None) or str(error)
    # web3.py returns 'execution reverted: <reason>'
    if 'execution reverted:' in msg:
        return msg.split('execution reverted:')[-1].strip().strip("'\"")
    return msg


class BorrowerWriter:
    """Submits addOrUpdateBorrower transactions"""

    def __init__(self, connector):
        self.connector = connector

    async def submit(self, borrower: BorrowerInput) -> Result[str, SubmissionError]:
        """
        Sign and send one addOrUpdateBorrower transaction.

        Returns as soon as the node accepts the raw transaction; the write
        is not visible to reads until it is mined. Gas and fee fields are
        left to the network defaults.
        """
        w3 = self.connector.w3
        account = self.connector.account

        logger.info("Submitting borrower", extra={"nid": borrower.nid})

        try:
            function = self.connector.handle.add_or_update_borrower(borrower)
            nonce = await w3.eth.get_transaction_count(account.address, 'pending')
            txn = await function.build_transaction({
                'from': account.address,
                'nonce': nonce,
                'chainId': self.connector.chain_id,
            })

            signed = account.sign_transaction(txn)
            tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)

        except Exception as e:
            reason = extract_revert_reason(e)
            logger.error("Borrower submission failed", extra={"nid": borrower.nid, "reason": reason})
            return Err(SubmissionError(reason, cause=e))

        tx_id = Web3.to_hex(tx_hash)
        logger.info("Transaction sent", extra={"nid": borrower.nid, "tx_hash": tx_id})
        return Ok(tx_id)
