from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Sequence, Tuple

SCORE_FIELDS = (
    'account_balance_score',
    'payment_history_score',
    'total_transactions_score',
    'total_remaining_loan_score',
    'credit_age_score',
    'professional_risk_factor_score',
)

# Display labels in contract field order
RECORD_LABELS = (
    ('nid', 'NID'),
    ('name', 'Name'),
    ('account_balance_score', 'Account Balance Score'),
    ('payment_history_score', 'Payment History Score'),
    ('total_transactions_score', 'Total Transactions Score'),
    ('total_remaining_loan_score', 'Total Remaining Loan Score'),
    ('credit_age_score', 'Credit Age Score'),
    ('professional_risk_factor_score', 'Professional Risk Score'),
    ('final_credit_score', 'FINAL CREDIT SCORE'),
)


# Request Models
class BorrowerInput(BaseModel):
    """Score inputs for one borrower, as sent to addOrUpdateBorrower"""
    model_config = ConfigDict(frozen=True)

    nid: str = Field(min_length=1)
    name: str = Field(min_length=1)
    account_balance_score: int = Field(default=85, ge=0, le=100)
    payment_history_score: int = Field(default=90, ge=0, le=100)
    total_transactions_score: int = Field(default=70, ge=0, le=100)
    total_remaining_loan_score: int = Field(default=95, ge=0, le=100)
    credit_age_score: int = Field(default=80, ge=0, le=100)
    professional_risk_factor_score: int = Field(default=75, ge=0, le=100)

    def contract_args(self) -> Tuple[Any, ...]:
        """Positional parameters: nid, name, then the six uint256 scores"""
        return (self.nid, self.name) + tuple(int(getattr(self, f)) for f in SCORE_FIELDS)


# Response Models
class BorrowerRecord(BaseModel):
    """Borrower as stored by the contract, including the computed score"""
    model_config = ConfigDict(frozen=True)

    nid: str
    name: str
    account_balance_score: int = Field(ge=0)
    payment_history_score: int = Field(ge=0)
    total_transactions_score: int = Field(ge=0)
    total_remaining_loan_score: int = Field(ge=0)
    credit_age_score: int = Field(ge=0)
    professional_risk_factor_score: int = Field(ge=0)
    final_credit_score: int = Field(ge=0)

    @classmethod
    def from_contract_tuple(cls, values: Sequence[Any]) -> 'BorrowerRecord':
        """Map the nine positional values returned by getBorrowerDetails.

        A struct output comes back from web3 as a single tuple, so a
        one-element sequence wrapping the values is unwrapped first.
        """
        if isinstance(values, (list, tuple)) and len(values) == 1 and isinstance(values[0], (list, tuple)):
            values = values[0]
        if not isinstance(values, (list, tuple)) or len(values) != len(RECORD_LABELS):
            raise ValueError(f"Expected {len(RECORD_LABELS)} borrower fields, got {values!r}")
        return cls(**{field: value for (field, _), value in zip(RECORD_LABELS, values)})

    def is_unset(self) -> bool:
        """Writes always carry a non-empty NID, so an empty one means no stored borrower"""
        return not self.nid

    def display_lines(self) -> List[str]:
        return [f"{label}: {getattr(self, field)}" for field, label in RECORD_LABELS]


class Phase(str, Enum):
    IDLE = 'idle'
    WRITING = 'writing'
    READING = 'reading'
    DONE = 'done'


class Outcome(str, Enum):
    WRITE_OK = 'write_ok'
    WRITE_ERR = 'write_err'
    READ_OK = 'read_ok'
    READ_ERR = 'read_err'


class UiState(BaseModel):
    """Everything the presentation layer renders"""
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    outcome: Optional[Outcome] = None
    status_message: str
    is_loading: bool = False
    connected: bool = False
    tx_hash: Optional[str] = None
    record: Optional[BorrowerRecord] = None
    details: str = ''


class HealthResponse(BaseModel):
    status: str
    blockchain_connected: bool
    agent_address: Optional[str] = None
    contract_address: Optional[str] = None
