from scorechain.schemas.schemas import Outcome, Phase, UiState
from scorechain.utils.errors import BorrowerNotFound, InitError, InvalidInput, Ok

NOT_CONNECTED = 'Please connect to the blockchain.'
READY = 'Ready to interact with the CreditScore contract.'


class OperationStateMachine:
    """
    Lifecycle of the current user-initiated operation.

    idle -> writing|reading -> done(outcome). A new request is accepted from
    any phase and overlapping operations race: whichever transition runs
    last sets the state. Each transition replaces the UiState value, it is
    never mutated in place.
    """

    def __init__(self):
        self._state = UiState(status_message=NOT_CONNECTED)

    @property
    def state(self) -> UiState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state.connected

    def _transition(self, **changes) -> UiState:
        self._state = UiState(connected=self._state.connected, **changes)
        return self._state

    def connected_ok(self) -> UiState:
        self._state = UiState(status_message=READY, connected=True)
        return self._state

    def connection_failed(self, error: InitError) -> UiState:
        """Persistent until the process is restarted with fixed config"""
        self._state = UiState(status_message=f'Error initializing: {error}', connected=False)
        return self._state

    def begin_write(self) -> UiState:
        return self._transition(
            phase=Phase.WRITING,
            status_message='Submitting data to the blockchain...',
            is_loading=True,
        )

    def finish_write(self, result) -> UiState:
        if isinstance(result, Ok):
            return self._transition(
                phase=Phase.DONE,
                outcome=Outcome.WRITE_OK,
                status_message=f'Transaction sent! Hash: {result.value}. Please wait a moment, then fetch details.',
                tx_hash=result.value,
            )
        return self._transition(
            phase=Phase.DONE,
            outcome=Outcome.WRITE_ERR,
            status_message=f'Error: {result.error}',
        )

    def begin_read(self, nid: str) -> UiState:
        return self._transition(
            phase=Phase.READING,
            status_message=f'Fetching details for NID: {nid}...',
            is_loading=True,
        )

    def finish_read(self, result) -> UiState:
        if isinstance(result, Ok):
            record = result.value
            return self._transition(
                phase=Phase.DONE,
                outcome=Outcome.READ_OK,
                status_message='Details fetched successfully!',
                record=record,
                details='\n'.join(record.display_lines()),
            )

        error = result.error
        if isinstance(error, BorrowerNotFound):
            message = 'Error fetching details. The borrower may not exist yet.'
        elif isinstance(error, InvalidInput):
            message = 'Please enter NID to fetch details.'
        else:
            message = f'Error fetching details: {error}'
        return self._transition(
            phase=Phase.DONE,
            outcome=Outcome.READ_ERR,
            status_message=message,
            details=f'Error: {error}',
        )
