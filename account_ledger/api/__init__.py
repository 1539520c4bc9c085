"""
Account Ledger API Application Factory
"""

from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from .. import __version__
from ..config import get_config
from ..errors import (
    AccountNotFoundError, InsufficientFundsError, InvalidAccountError,
    InvalidAmountError, StorageError
)
from ..logging_config import get_logger, setup_logging
from .dependencies import LedgerSystem
from .ledger import router as ledger_router
from .events import router as events_router


logger = get_logger(__name__)


def _error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map ledger errors onto HTTP responses"""
    
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"detail": _error_message(exc)})
    
    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(request: Request, exc: AccountNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=0)
    
    @app.exception_handler(InvalidAmountError)
    @app.exception_handler(InvalidAccountError)
    @app.exception_handler(InsufficientFundsError)
    async def bad_request_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"detail": str(exc)})
    
    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Ledger storage failure on %s %s", request.method, request.url.path,
                     exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"detail": "Ledger storage failure"})


def create_app(system: Optional[LedgerSystem] = None) -> FastAPI:
    """
    Create and configure the FastAPI application
    
    Args:
        system: Ledger system to serve; built from configuration on the
            first request when omitted
    """
    config = get_config()
    setup_logging(level=config.log_level, log_format=config.log_format)
    
    app = FastAPI(
        title="Account Ledger API",
        description="File-backed account ledger with deposit, withdraw and transfer events",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    
    app.state.ledger_system = system
    register_exception_handlers(app)
    
    app.include_router(ledger_router, tags=["Ledger"])
    app.include_router(events_router, tags=["Events"])
    
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "account_ledger_api",
            "version": __version__
        }
    
    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8090, reload: bool = False):
    """Run the FastAPI server"""
    uvicorn.run(
        "account_ledger.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )
