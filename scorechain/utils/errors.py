"""Error taxonomy and result values for contract operations.

Core operations never raise for expected failures. They return ``Ok(value)``
or ``Err(error)`` so the caller has to branch on the outcome, and the error
carries one of the kinds below.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound="ScoreChainError")


class ScoreChainError(Exception):
    """Base error for the contract client"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


# --- Initialization ---------------------------------------------------------

class InitError(ScoreChainError):
    """Startup failed; no chain operations are possible"""


class InvalidCredential(InitError):
    """Private key does not decode to a signing key"""


class AbiResolutionError(InitError):
    """ABI could not be parsed or a required function is missing"""


class InvalidContractAddress(InitError):
    """Contract address is not a valid 20-byte address"""


# --- Writes -----------------------------------------------------------------

class WriteError(ScoreChainError):
    """Borrower write was not accepted by the network"""


class SubmissionError(WriteError):
    """Signing or sending the transaction failed"""


# --- Reads ------------------------------------------------------------------

class ReadError(ScoreChainError):
    """Borrower read failed"""


class InvalidInput(ReadError):
    """Request rejected before any network call"""


class BorrowerNotFound(ReadError):
    """Contract returned its default record (or reverted) for this NID.

    The contract has no existence flag, so a borrower that was never written
    and one written with default values look the same.
    """


class DecodeError(ReadError):
    """Call result did not map onto a borrower record"""


class NetworkError(ReadError):
    """RPC endpoint failed or was unreachable"""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result = Union[Ok[T], Err[E]]
