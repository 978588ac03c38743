"""Endpoints for recording and viewing ledger transactions."""

import asyncio
import logging
import os
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from ledger.schemas import (
    ErrorResponse,
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
)
from ledger.store import TransactionStore, get_store

logger = logging.getLogger(__name__)

# Mutating requests answer only after this delay to mimic network latency.
# The store change itself is applied before the wait starts.
RESPONSE_DELAY_MS = int(os.getenv("RESPONSE_DELAY_MS", "500"))

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _json_body(model) -> dict:
    """OpenAPI request body documenting ``model`` with its wire names."""
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": model.model_json_schema(by_alias=True)}
            },
        }
    }


def get_response_delay() -> float:
    """Seconds to wait before answering a mutating request."""
    return RESPONSE_DELAY_MS / 1000


async def _simulate_latency(delay: float) -> None:
    if delay > 0:
        await asyncio.sleep(delay)


@router.get("", response_model=list[TransactionRead])
async def list_transactions(store: TransactionStore = Depends(get_store)):
    """Return every transaction in insertion order."""
    return [TransactionRead.model_validate(tx) for tx in store.list_all()]


@router.post(
    "",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    openapi_extra=_json_body(TransactionCreate),
)
async def add_transaction(
    payload: dict[str, Any] = Body(...),
    store: TransactionStore = Depends(get_store),
    delay: float = Depends(get_response_delay),
):
    """Create a transaction; the caller supplies its UUID."""
    new_tx = store.create(payload)
    logger.info(
        "Transaction %s created: type %s amount %s",
        new_tx.id,
        new_tx.type_id,
        new_tx.amount,
    )
    await _simulate_latency(delay)
    return TransactionRead.model_validate(new_tx)


@router.patch(
    "/{transaction_id}",
    response_model=TransactionRead,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    openapi_extra=_json_body(TransactionUpdate),
)
async def update_transaction_route(
    transaction_id: str,
    patch: dict[str, Any] = Body(...),
    store: TransactionStore = Depends(get_store),
    delay: float = Depends(get_response_delay),
):
    """Overwrite the supplied fields of a transaction."""
    updated = store.update(transaction_id, patch)
    logger.info("Transaction %s updated: %s", transaction_id, sorted(patch))
    await _simulate_latency(delay)
    return TransactionRead.model_validate(updated)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_transaction_route(
    transaction_id: str,
    store: TransactionStore = Depends(get_store),
    delay: float = Depends(get_response_delay),
):
    store.delete(transaction_id)
    logger.info("Transaction %s deleted", transaction_id)
    await _simulate_latency(delay)
