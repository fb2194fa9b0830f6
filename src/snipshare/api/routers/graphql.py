"""
snipshare.api.routers.graphql

GraphQL endpoint.

Responsibilities:
- Accept `{query, variables, operationName}` over POST.
- Execute against the compiled schema with the per-request context.
- Return `{data, errors}` with errors formatted by `api.errors`.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from graphql import graphql
from pydantic import BaseModel, ConfigDict, Field

from snipshare.api.deps import request_context
from snipshare.api.errors import format_error
from snipshare.auth.context import RequestContext

router = APIRouter()


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(min_length=1)
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")


@router.post("/graphql")
async def execute_graphql(
    request: Request,
    body: GraphQLRequest,
    context: RequestContext = Depends(request_context),
) -> dict[str, Any]:
    structlog.contextvars.bind_contextvars(
        operation=body.operation_name,
        authenticated=context.identity.is_authenticated,
    )
    result = await graphql(
        request.app.state.schema,
        source=body.query,
        variable_values=body.variables,
        operation_name=body.operation_name,
        context_value=context,
    )

    payload: dict[str, Any] = {"data": result.data}
    if result.errors:
        payload["errors"] = [format_error(error) for error in result.errors]
    return payload


# --- Module Notes -----------------------------------------------------------
# Always 200 once the body parses: per-field failures travel in `errors`
# alongside partial `data`, as GraphQL clients expect.
