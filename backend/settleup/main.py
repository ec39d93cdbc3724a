"""FastAPI app entrypoint."""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settleup.exceptions import LedgerInvariantViolation
from settleup.routers import balances, expenses, settlements, splits

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in _origins_env.split(",") if o.strip()] if _origins_env else ["*"]

app = FastAPI(
    title="SettleUp Ledger API",
    description="Split expenses, track who owes whom, and settle up in as few payments as possible.",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(splits.router, prefix="/api")
app.include_router(expenses.router, prefix="/api")
app.include_router(settlements.router, prefix="/api")
app.include_router(balances.router, prefix="/api")


@app.exception_handler(LedgerInvariantViolation)
def ledger_invariant_violation(request: Request, exc: LedgerInvariantViolation):
    logger.error("Ledger invariant violated on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Ledger is inconsistent"})


@app.get("/")
def root():
    return {"message": "SettleUp Ledger API", "docs": "/docs"}
