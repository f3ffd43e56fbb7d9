"""
Books API — the single proxied route.
Upstream failures are answered with a fixed generic 500; nothing about the
upstream error (or the credential) ever reaches the caller.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.data.proxy import CachedProxy
from app.data.upstream_client import UpstreamError

logger = logging.getLogger(__name__)
router = APIRouter()

GENERIC_ERROR_BODY = {"message": "Internal Server Error"}


def get_proxy(request: Request) -> CachedProxy:
    return request.app.state.proxy


@router.get("/books")
async def get_books(proxy: CachedProxy = Depends(get_proxy)):
    """Upstream books payload, served from cache while fresh."""
    try:
        payload = await proxy.get()
    except UpstreamError:
        # Already logged by the client with the upstream detail
        return JSONResponse(status_code=500, content=GENERIC_ERROR_BODY)
    return JSONResponse(content=payload)
