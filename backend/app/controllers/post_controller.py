"""
Layerpost Backend — Post Controller
====================================

What:  Maps plain-data payloads onto PostService calls and ServiceResults onto
       HTTP responses.
Why:   Route functions stay declarative (path, dependencies, docs) while the
       status/body mapping lives in one testable class.

Contract:
    - Receives only plain data (dict / ids), never the Request or Response.
    - Calls exactly one service operation per handler.
    - Success: the operation's body with the handler's success status.
    - Failure: FAILURE_STATUS with the error envelope as body. NotFoundError
      on get/update/delete is the one exception and maps to 404.
"""

from typing import Any, Mapping, Optional
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.exceptions import NotFoundError, error_body
from app.middleware.request_id import request_id_var
from app.services.post_service import PostService
from app.services.result import ServiceResult

# Status for every failed service result except not-found lookups
FAILURE_STATUS = 500


class PostController:

    def __init__(self, service: PostService, expose_errors: bool = True):
        self.service = service
        self.expose_errors = expose_errors

    async def create(self, payload: Optional[Mapping[str, Any]]) -> Response:
        result = await self.service.create(payload)
        return self._respond(result, success_status=201)

    async def get(self, post_id: UUID) -> Response:
        result = await self.service.get(post_id)
        return self._respond(result)

    async def list(self, limit: int, offset: int) -> Response:
        result = await self.service.list(limit=limit, offset=offset)
        return self._respond(result)

    async def update(self, post_id: UUID, payload: Optional[Mapping[str, Any]]) -> Response:
        result = await self.service.update(post_id, payload)
        return self._respond(result)

    async def delete(self, post_id: UUID) -> Response:
        result = await self.service.delete(post_id)
        return self._respond(result, success_status=204)

    def _respond(self, result: ServiceResult, success_status: int = 200) -> Response:
        if result.success:
            if success_status == 204:
                return Response(status_code=204)
            return JSONResponse(status_code=success_status, content=jsonable_encoder(result.body))

        status = 404 if isinstance(result.error, NotFoundError) else FAILURE_STATUS
        return JSONResponse(
            status_code=status,
            content=error_body(
                result.error,
                request_id=request_id_var.get("") or None,
                expose_details=self.expose_errors,
            ),
        )
