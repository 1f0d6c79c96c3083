"""
HTTP endpoint for the greedy dispatcher.

``POST /vpr/greedy`` accepts a dispatch request body and answers with
``{"routes": [...], "unassigned": [...]}``. Bodies that are not valid JSON or
that fail request validation are answered with HTTP 400.
"""

import dataclasses

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quicksilver import __version__
from quicksilver.api import solve
from quicksilver.config import load_default_params
from quicksilver.config.params import QuicksilverParams
from quicksilver.core_types import DispatchRequest
from quicksilver.utils.logging import QuicksilverLogger

logger = QuicksilverLogger.get_logger(__name__)


def create_app(params: QuicksilverParams | None = None) -> FastAPI:
    """Build the FastAPI application bound to ``params``."""
    params = params or load_default_params()
    greedy_params = dataclasses.replace(
        params,
        algorithm=dataclasses.replace(params.algorithm, dispatcher="greedy"),
    )

    app = FastAPI(title="Quicksilver", version=__version__)

    @app.post("/vpr/greedy")
    async def solve_greedy(request: Request):
        try:
            payload = await request.json()
            dispatch_request = DispatchRequest.from_dict(payload)
        except ValueError as e:
            # Covers malformed JSON, bad encoding and InvalidRequestError
            logger.warning(f"Rejected dispatch request: {e}")
            return JSONResponse(
                status_code=400, content={"error": "Invalid JSON", "detail": str(e)}
            )

        solution = solve(dispatch_request, config=greedy_params)
        return solution.to_dict()

    return app


def run_server(params: QuicksilverParams | None = None) -> None:
    """Serve the dispatch endpoint with uvicorn until interrupted."""
    params = params or load_default_params()
    uvicorn.run(create_app(params), host=params.server.host, port=params.server.port)
