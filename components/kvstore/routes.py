from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .contracts import HealthResult, KeyValueStorePort, Value, decode_value
from .errors import (
    AlreadyExistsError,
    InvalidKeyError,
    InvalidValueError,
    KVStoreError,
    NotFoundError,
    UnsupportedMethodError,
)

log = logging.getLogger("kvstore.routes")

STORAGE_PREFIX = "/storage"
SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
# Registered so unsupported verbs get our 405 payload instead of the framework default
ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE"]

router = APIRouter(tags=["kvstore"])


def get_store(request: Request) -> KeyValueStorePort:
    return request.app.state.store


def _decode_value(raw: bytes) -> Value:
    try:
        return decode_value(raw)
    except ValueError as e:  # includes pydantic.ValidationError
        log.error("Failed to decode request body", extra={"error": str(e)})
        raise InvalidValueError()


def _dispatch(store: KeyValueStorePort, method: str, key: str, value: Optional[Value]) -> Response:
    if method == "POST":
        store.create(key, value)
        log.info("Data stored successfully", extra={"key": key, "value": value})
        return Response(status_code=201)
    if method == "PUT":
        store.upsert(key, value)
        log.info("Value updated", extra={"key": key, "value": value})
        return Response(status_code=200)
    if method == "GET":
        found = store.read(key)
        log.info("Data successfully found and returned", extra={"key": key})
        return JSONResponse(content={key: found})
    if method == "DELETE":
        store.delete(key)
        log.info("Data deleted successfully", extra={"key": key})
        return Response(status_code=204)
    raise UnsupportedMethodError()


@router.get("/health", response_model=HealthResult)
def health():
    return HealthResult(ok=True)


@router.api_route(STORAGE_PREFIX + "/{key:path}", methods=ALL_METHODS)
async def storage(key: str, request: Request, store: KeyValueStorePort = Depends(get_store)) -> Response:
    method = request.method.upper()
    try:
        if not key:
            raise InvalidKeyError()
        if method not in SUPPORTED_METHODS:
            log.warning("Unsupported method", extra={"method": method, "key": key})
            raise UnsupportedMethodError()

        value: Optional[Value] = None
        if method in ("POST", "PUT"):
            value = _decode_value(await request.body())

        # the store blocks on its lock; keep that off the event loop
        return await run_in_threadpool(_dispatch, store, method, key, value)

    except (AlreadyExistsError, NotFoundError) as e:
        log.warning(str(e), extra={"key": key, "code": e.code})
        raise HTTPException(status_code=e.status, detail=e.detail().model_dump(exclude_none=True))
    except KVStoreError as e:
        raise HTTPException(status_code=e.status, detail=e.detail().model_dump(exclude_none=True))
