from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from splits_core import (
    MissingInputError,
    RawSplitRecord,
    SplitsSource,
    UnexpectedTransformError,
    UpstreamUnavailable,
    build_views,
    records_from_payload,
)

PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", Path(__file__).resolve().parent.parent / "public"))
MOBILE_UA = re.compile(r"Mobi|Android|iPhone|iPad", re.IGNORECASE)

app = FastAPI(title="Wave Splits Results API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger(__name__)


class TimingRowModel(BaseModel):
    name: str = Field(alias="Name")
    bib: str = Field(alias="Bib")
    club: str = Field(alias="Club")
    cat: str = Field(alias="Cat")
    wave_name: str = Field(alias="WaveName")
    age: str = Field(alias="Age")
    gender: str = Field(alias="Gender")
    custom: str = Field(alias="Custom")
    handicap: str = Field(alias="Handicap")
    start: str = Field(alias="Start")
    split_1000m: str = Field(alias="1000m")
    split2: str = Field(alias="Split2")
    split3: str = Field(alias="Split3")
    split4: str = Field(alias="Split4")
    finish: str = Field(alias="Finish")
    result: str = Field(alias="Result")
    penalty: str = Field(alias="Penalty")
    penalty_note: str = Field(alias="PenaltyNote")

    model_config = ConfigDict(populate_by_name=True)


class WaveHeaderModel(BaseModel):
    wave_header: str = Field(alias="WaveHeader")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class LeaderboardRowModel(BaseModel):
    rank: str = Field(default="", alias="Rank")
    name: str = Field(alias="Name")
    bib: str = Field(alias="Bib")
    club: str = Field(alias="Club")
    cat: str = Field(alias="Cat")
    age: str = Field(alias="Age")
    gender: str = Field(alias="Gender")
    lane: str = Field(alias="Lane")
    handicap: str = Field(alias="Handicap")
    split: str = Field(alias="1000m")
    split_diff: str = Field(alias="1000mDiff")
    split_rank: str = Field(alias="1000mRank")
    second_half: str = Field(alias="2000m")
    second_half_diff: str = Field(alias="2000mDiff")
    second_half_rank: str = Field(alias="2000mRank")
    result: str = Field(alias="Result")
    result_diff: str = Field(alias="ResultDiff")
    result_rank: str = Field(alias="ResultRank")
    pace: str = Field(alias="Pace")
    pace_unit: str = Field(alias="PaceUnit")

    model_config = ConfigDict(populate_by_name=True)


class ResultsResponse(BaseModel):
    timing: List[TimingRowModel]
    results: List[Union[WaveHeaderModel, LeaderboardRowModel]]


class TransformRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    race_distance: Optional[float] = Field(default=None, alias="raceDistance", gt=0)
    pace_distance: Optional[float] = Field(default=None, alias="paceDistance", gt=0)

    model_config = ConfigDict(populate_by_name=True)


@lru_cache(maxsize=1)
def source() -> SplitsSource:
    return SplitsSource()


def _results_response(records: List[RawSplitRecord], **options: float) -> ResultsResponse:
    if not records:
        raise HTTPException(status_code=404, detail="No split data available")

    try:
        views = build_views(records, **options)
    except UnexpectedTransformError as exc:
        logger.exception("Failed to transform split records")
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return ResultsResponse(
        timing=[TimingRowModel(**row) for row in views["timing"]],
        results=[
            WaveHeaderModel(**row) if "WaveHeader" in row else LeaderboardRowModel(**row)
            for row in views["results"]
        ],
    )


@app.get("/", include_in_schema=False)
def index(user_agent: str = Header(default="")):
    page = "mobile.html" if MOBILE_UA.search(user_agent or "") else "index.html"
    path = PUBLIC_DIR / page
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"{page} not found")
    return FileResponse(path)


@app.get("/_health", response_class=PlainTextResponse)
def plain_health() -> str:
    return "ok"


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/results", response_model=ResultsResponse)
def results():
    try:
        records = source().fetch_raw_records()
    except MissingInputError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamUnavailable as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Unexpected failure loading split records")
        raise HTTPException(status_code=500, detail="Internal server error") from exc
    return _results_response(records)


@app.post("/api/transform", response_model=ResultsResponse)
def transform(payload: TransformRequest):
    options = {
        key: value
        for key, value in (
            ("race_distance", payload.race_distance),
            ("pace_distance", payload.pace_distance),
        )
        if value is not None
    }
    return _results_response(records_from_payload(payload.records), **options)


# Registered last so the routes above take precedence over files in public/.
if PUBLIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=PUBLIC_DIR), name="static")


def run() -> None:
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    port = int(os.getenv("PORT", "10000"))
    logger.info("Server running on port %s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
