from typing import Tuple

from scorechain.schemas.schemas import BorrowerInput, UiState
from scorechain.services.borrower_reader import BorrowerReader
from scorechain.services.borrower_writer import BorrowerWriter
from scorechain.services.chain_connector import ChainConnector
from scorechain.services.operation_state import OperationStateMachine
from scorechain.utils.errors import Result


class CreditScoreService:
    """Runs writes and reads through the state machine"""

    def __init__(self, connector: ChainConnector, machine: OperationStateMachine):
        self.connector = connector
        self.machine = machine
        self.writer = BorrowerWriter(connector)
        self.reader = BorrowerReader(connector)

    async def add_or_update_borrower(self, borrower: BorrowerInput) -> Tuple[UiState, Result]:
        self.machine.begin_write()
        result = await self.writer.submit(borrower)
        return self.machine.finish_write(result), result

    async def fetch_borrower_details(self, nid: str) -> Tuple[UiState, Result]:
        self.machine.begin_read(nid)
        result = await self.reader.fetch(nid)
        return self.machine.finish_read(result), result
