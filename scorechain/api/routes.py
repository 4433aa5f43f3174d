from fastapi import APIRouter, HTTPException, Query

from scorechain.schemas.schemas import BorrowerInput, HealthResponse, UiState
from scorechain.utils.errors import (
    BorrowerNotFound,
    DecodeError,
    Err,
    InvalidInput,
    NetworkError,
    SubmissionError,
)

router = APIRouter()

# Will be injected from main.py
credit_score_service = None
state_machine = None

ERROR_STATUS_CODES = (
    (InvalidInput, 400),
    (BorrowerNotFound, 404),
    (DecodeError, 502),
    (NetworkError, 502),
    (SubmissionError, 502),
)


def _require_service():
    """Chain operations are impossible until initialization succeeded"""
    if credit_score_service is None:
        if state_machine is None:
            raise HTTPException(status_code=503, detail="Chain connector is not initialized")
        raise HTTPException(status_code=503, detail=state_machine.state.model_dump(mode='json'))
    return credit_score_service


def _raise_for_error(result, state: UiState):
    if not isinstance(result, Err):
        return
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(result.error, error_type)),
        500
    )
    raise HTTPException(status_code=status_code, detail=state.model_dump(mode='json'))

# ============================================================================
# HEALTH & STATUS
# ============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    if credit_score_service is None:
        return HealthResponse(status="unavailable", blockchain_connected=False)

    connector = credit_score_service.connector
    return HealthResponse(
        status="healthy",
        blockchain_connected=await connector.is_connected(),
        agent_address=connector.account.address,
        contract_address=connector.handle.address,
    )


@router.get("/status", response_model=UiState)
async def current_status():
    """Status and last result for the presentation layer"""
    if state_machine is None:
        raise HTTPException(status_code=503, detail="Chain connector is not initialized")
    return state_machine.state

# ============================================================================
# BORROWERS
# ============================================================================

@router.post("/borrowers", response_model=UiState)
async def add_or_update_borrower(borrower: BorrowerInput):
    """
    Send an addOrUpdateBorrower transaction.
    Returns once the node accepts it; fetch details after it is mined.
    """
    service = _require_service()
    state, result = await service.add_or_update_borrower(borrower)
    _raise_for_error(result, state)
    return state


@router.get("/borrowers", response_model=UiState)
async def fetch_borrower_details(nid: str = Query(default="")):
    """Read stored inputs and the contract-computed final credit score"""
    service = _require_service()
    state, result = await service.fetch_borrower_details(nid)
    _raise_for_error(result, state)
    return state
