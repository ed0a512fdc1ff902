import json
import logging
from typing import List, NoReturn

from aiohttp import web
from pydantic import BaseModel
import sentry_sdk

from org.repository.handle.app.config import (
    DatabaseSessionMakerAppKey,
    HandleRegistryAppKey,
)
from org.repository.handle.resolve.errors import (
    HandleException,
    InvalidHandle,
    UnsupportedResourceType,
)
from org.repository.handle.resolve.registry import canonical_form

logger = logging.getLogger(__name__)


class ResolvedHandle(BaseModel):
    """A handle together with its canonical form and dissemination URL."""

    handle: str
    canonical_form: str
    url: str


def raise_for_handle_exception(e: HandleException) -> NoReturn:
    """Translate a registry failure into an HTTP error response.

    Bad input and unsupported resource kinds are the client's problem. Missing
    configuration and corrupt records are ours and are reported to Sentry.
    """
    body = json.dumps({"error": str(e), "error_type": type(e).__name__})
    if isinstance(e, InvalidHandle):
        raise web.HTTPBadRequest(body=body, content_type="application/json")
    if isinstance(e, UnsupportedResourceType):
        raise web.HTTPUnprocessableEntity(body=body, content_type="application/json")

    logger.error("Handle registry failure: %s: %s", type(e).__name__, e)
    sentry_sdk.capture_exception(e)
    raise web.HTTPInternalServerError(body=body, content_type="application/json")


async def handle_handle_redirect(request: web.Request):
    handle = request.match_info.get("handle", "")
    registry = request.app[HandleRegistryAppKey]
    database_session_maker = request.app[DatabaseSessionMakerAppKey]

    async with database_session_maker() as database_session:
        try:
            url = await registry.resolve_to_url(database_session, handle)
        except HandleException as e:
            raise_for_handle_exception(e)

    if url is None:
        raise web.HTTPNotFound(
            body=json.dumps({"error": "Handle not found", "handle": handle}),
            content_type="application/json",
        )
    raise web.HTTPFound(url)


async def handle_internal_resolve(request: web.Request):
    handles = request.query.getall("handle", [])
    if len(handles) == 0:
        return web.json_response([])

    registry = request.app[HandleRegistryAppKey]
    database_session_maker = request.app[DatabaseSessionMakerAppKey]

    results: List[ResolvedHandle] = []
    async with database_session_maker() as database_session:
        for handle in handles:
            try:
                url = await registry.resolve_to_url(database_session, handle)
            except HandleException as e:
                raise_for_handle_exception(e)
            if url is None:
                continue
            results.append(
                ResolvedHandle(
                    handle=handle, canonical_form=canonical_form(handle), url=url
                )
            )
    return web.json_response([result.model_dump() for result in results])


async def handle_internal_handles(request: web.Request):
    prefix = request.query.get("prefix", None)
    if prefix is None:
        raise web.HTTPBadRequest(
            body=json.dumps({"error": "Missing prefix"}),
            content_type="application/json",
        )

    registry = request.app[HandleRegistryAppKey]
    database_session_maker = request.app[DatabaseSessionMakerAppKey]

    async with database_session_maker() as database_session:
        handles = await registry.get_handles_for_prefix(database_session, prefix)
    return web.json_response(handles)
