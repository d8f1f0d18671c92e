import logging
import os
from typing import Any, List, Optional

import sentry_sdk
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sentry_sdk.integrations.aws_lambda import AwsLambdaIntegration

from analysis.analyze import analyze
from analysis.errors import ConfigurationError
from analysis.settings import AnalysisSettings
from report import Encounter, Fight, Source

SENTRY_ENABLED = os.environ.get("AWS_EXECUTION_ENV") is not None
if SENTRY_ENABLED:
    sentry_sdk.init(
        dsn=os.environ.get("SENTRY_DSN"),
        traces_sample_rate=0.05,
        attach_stacktrace=True,
        integrations=[AwsLambdaIntegration()],
    )
app = FastAPI()
settings = AnalysisSettings.from_env()
if settings.debug:
    logging.getLogger("analysis").setLevel(logging.DEBUG)


async def catch_exceptions_middleware(request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logging.exception(e)
        return Response("Internal server error", status_code=500)


# Add this middleware first so 500 errors have CORS headers
app.middleware("http")(catch_exceptions_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "https://www.warcraftlogs.com",
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)


class PlayerRequest(BaseModel):
    id: int
    name: str
    pets: List[int] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
    player: PlayerRequest
    start_time: int
    end_time: int
    encounter: str = "Unknown"
    spec: Optional[str] = None
    # raw log events, validated one by one during analysis so a bad one is
    # skipped instead of rejecting the request
    events: List[Any]


class AnalyzeResponse(BaseModel):
    data: dict


@app.post("/analyze_fight", response_model=AnalyzeResponse)
def analyze_fight(request: AnalyzeRequest, response: Response):
    if request.end_time < request.start_time:
        response.status_code = 400
        return {"data": {"error": "Fight ends before it starts"}}

    fight = Fight(
        Source(request.player.id, request.player.name, request.player.pets),
        request.events,
        request.start_time,
        request.end_time,
        encounter=Encounter(request.encounter),
        spec=request.spec,
    )

    try:
        results = analyze(fight, settings)
    except ConfigurationError as e:
        logging.error(f"Invalid analysis configuration: {e}")
        response.status_code = 400
        return {"data": {"error": str(e)}}

    logging.info(
        f"Analyzed {results['num_events']} events for {request.player.name}, "
        f"skipped {results['skipped_events']}"
    )
    response.headers["Cache-Control"] = "no-cache"
    return {"data": results}
