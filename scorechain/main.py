import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scorechain.api import routes
from scorechain.services.chain_connector import ChainConnector, read_abi_file
from scorechain.services.credit_score_service import CreditScoreService
from scorechain.services.operation_state import OperationStateMachine
from scorechain.utils.config import Config
from scorechain.utils.errors import Err, InitError
from scorechain.utils.logging import mask_secret, setup_logging

logger = logging.getLogger(__name__)


def connect():
    """Build the chain connector from config; failures stay on the status"""
    try:
        Config.validate()
        abi_source = read_abi_file(Config.CREDIT_SCORE_ABI_PATH)
    except InitError as e:
        return Err(e)
    except ValueError as e:
        return Err(InitError(str(e), cause=e))

    logger.info(
        "Connecting to chain",
        extra={
            "chain_id": Config.chain_id(),
            "private_key": mask_secret(Config.PRIVATE_KEY),
        }
    )
    return ChainConnector.initialize(
        rpc_url=Config.RPC_URL,
        private_key=Config.PRIVATE_KEY,
        contract_address=Config.CONTRACT_ADDRESS,
        abi_source=abi_source,
        chain_id=Config.chain_id(),
        inject_poa=Config.INJECT_POA_MIDDLEWARE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""

    # Startup
    setup_logging(Config.LOG_LEVEL)
    logger.info("Credit scoring client starting")

    machine = OperationStateMachine()
    routes.state_machine = machine

    result = connect()
    if isinstance(result, Err):
        logger.error("Initialization failed", extra={"reason": str(result.error)})
        machine.connection_failed(result.error)
        routes.credit_score_service = None
    else:
        machine.connected_ok()
        routes.credit_score_service = CreditScoreService(result.value, machine)

    yield

    # Shutdown
    logger.info("Shutting down")


# Create FastAPI app
app = FastAPI(
    title="Credit Scoring API",
    description="Register borrower score inputs on the CreditScore contract and read the computed score",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(routes.router, prefix="/api", tags=["borrowers"])


@app.get("/")
async def root():
    return {
        "message": "Credit Scoring API",
        "docs": "/docs",
        "health": "/api/health",
        "status": "/api/status"
    }


def run():
    import uvicorn
    uvicorn.run(app, host=Config.API_HOST, port=Config.api_port())


if __name__ == "__main__":
    run()
