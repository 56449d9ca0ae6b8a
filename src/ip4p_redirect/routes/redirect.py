"""Redirect endpoint — every path not claimed by another route.

The whole path after the leading "/" is the identifier. Any method.
Success is a 301 to https://{ipv4}:{port}; failures get a status and a
generic message, never the decoder's internal reason.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse

from ip4p_redirect.deps import get_router
from ip4p_redirect.router import Router, RouterError, RouterErrorKind

router = APIRouter(tags=["redirect"])

METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ERROR_RESPONSES: dict[RouterErrorKind, tuple[int, str]] = {
    RouterErrorKind.BAD_REQUEST: (400, "identifier required"),
    RouterErrorKind.NOT_FOUND: (404, "identifier not found"),
    RouterErrorKind.RESOLUTION_FAILED: (500, "failed to resolve address"),
    RouterErrorKind.DECODE_FAILED: (500, "failed to parse IP4P address"),
}


def error_response(error: RouterError) -> JSONResponse:
    status_code, detail = ERROR_RESPONSES[error.kind]
    return JSONResponse(status_code=status_code, content={"detail": detail})


@router.api_route("/{identifier:path}", methods=METHODS, include_in_schema=False)
def redirect(identifier: str, redirect_router: Router = Depends(get_router)):
    result = redirect_router.route(identifier)
    if isinstance(result, RouterError):
        return error_response(result)
    return RedirectResponse(result.url, status_code=301)
