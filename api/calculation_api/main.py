"""FastAPI app with Strawberry GraphQL."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from calculation_api.quotes import close_redis
from calculation_api.schema import API_VERSION, schema

logging.basicConfig(
    level=os.environ.get("CALC_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the Redis quote connection on shutdown."""
    try:
        yield
    finally:
        close_redis()


app = FastAPI(title="Calculation API", version=API_VERSION, lifespan=lifespan)
graphql_app = GraphQLRouter(schema)
app.include_router(graphql_app, prefix="/graphql")


@app.get("/health")
def health() -> dict[str, str]:
    """Health check for load balancers and Docker."""
    return {"status": "ok"}
