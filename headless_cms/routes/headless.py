"""
Headless GraphQL Routes

POST /graphql/headless      execute a query or mutation
GET  /graphql/headless/sdl  printed schema

The schema lives in ``app.state.headless_schema``; it is generated at startup
and replaced wholesale when content models change.
"""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from graphql import GraphQLSchema, print_schema
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from headless_cms.config import settings
from headless_cms.database import get_db
from headless_cms.graphql.context import HeadlessContext
from headless_cms.graphql.schema import execute_operation
from headless_cms.services.user_service import SqlUserLookup

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Headless GraphQL"])


class GraphQLRequest(BaseModel):
    """GraphQL-over-HTTP request body."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")


def get_headless_schema(request: Request) -> GraphQLSchema:
    schema = getattr(request.app.state, "headless_schema", None)
    if schema is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Headless schema is not available",
        )
    return schema


@router.post("")
async def execute_headless_operation(
    payload: GraphQLRequest,
    schema: GraphQLSchema = Depends(get_headless_schema),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Execute a headless GraphQL operation."""
    # One lock per request: resolvers of an operation share its session
    db_lock = asyncio.Lock()
    context = HeadlessContext(
        db=db,
        user_lookup=SqlUserLookup(db, lock=db_lock),
        db_lock=db_lock,
        resolved_value_timeout=settings.resolved_value_timeout,
    )
    result = await execute_operation(
        schema,
        payload.query,
        context,
        variables=payload.variables,
        operation_name=payload.operation_name,
        timeout=settings.operation_timeout,
    )
    if result.errors:
        logger.info(
            "Headless operation finished with %d errors",
            len(result.errors),
            extra={"operation_name": payload.operation_name},
        )
    return JSONResponse(content=result.formatted)


@router.get("/sdl", response_class=PlainTextResponse)
async def get_headless_sdl(schema: GraphQLSchema = Depends(get_headless_schema)) -> str:
    """Printed SDL of the current headless schema."""
    return print_schema(schema)
