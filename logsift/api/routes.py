"""
FastAPI API routes.

Routes are ``async def`` so they all run on the event loop thread; the
session and its connection are never touched from two threads.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from logsift import __version__
from logsift.api.dependencies import get_session_holder
from logsift.config import get_settings
from logsift.exceptions import IngestionError, StoreError, UnknownPresetError
from logsift.filtering.presets import PRESETS
from logsift.filtering.state import FilterPending
from logsift.parsers.json_parser import JSONLogParser
from logsift.session import LogSession


router = APIRouter()


# Request/Response Models
class IngestRequest(BaseModel):
    """Request model for loading log content."""
    log_content: str


class IngestResponse(BaseModel):
    """Response model for a completed load."""
    parsed: int
    failed: int
    total_lines: int
    columns: List[str]


class FilterRequest(BaseModel):
    """Request model for applying a filter."""
    expression: str


class FilterStatus(BaseModel):
    """Current filter state."""
    state: str
    active_filter: Optional[str] = None
    pending_filter: Optional[str] = None
    last_error: Optional[str] = None
    record_count: int


class RecordsResponse(BaseModel):
    """Current record set plus the filter that produced it."""
    filter: FilterStatus
    records: List[Dict[str, Any]]


class SchemaField(BaseModel):
    """One filterable column."""
    name: str
    type: str


class PresetInfo(BaseModel):
    """A canned filter."""
    name: str
    description: str


class ParseErrorInfo(BaseModel):
    """A line that could not be ingested."""
    line_number: int
    reason: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    loaded: bool


def _current_session() -> LogSession:
    session = get_session_holder().session
    if session is None:
        raise HTTPException(status_code=404, detail="No logs loaded")
    return session


def _filter_status(session: LogSession) -> FilterStatus:
    filters = session.filters
    return FilterStatus(
        state=filters.state.name,
        active_filter=filters.active_filter,
        pending_filter=filters.state.text if isinstance(filters.state, FilterPending) else None,
        last_error=filters.last_error,
        record_count=len(filters.records),
    )


# Routes
@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        loaded=get_session_holder().is_loaded,
    )


@router.post("/api/ingest", response_model=IngestResponse)
async def ingest_logs(request: IngestRequest):
    """
    Load newline-delimited JSON logs into a new session.

    Only one load per session: the schema cannot change afterwards.
    """
    holder = get_session_holder()
    if holder.is_loaded:
        raise HTTPException(status_code=409, detail="Logs already loaded; schema is frozen")

    if not request.log_content or not request.log_content.strip():
        raise HTTPException(status_code=400, detail="Log content is required")

    parse_result = JSONLogParser().parse_content(request.log_content)
    try:
        session = LogSession.load(parse_result, get_settings())
    except IngestionError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    holder.install(session)
    summary = parse_result.summary()
    return IngestResponse(
        parsed=summary["parsed"],
        failed=summary["failed"],
        total_lines=summary["total_lines"],
        columns=list(session.db.field_names),
    )


@router.get("/api/records", response_model=RecordsResponse)
async def list_records(limit: Optional[int] = None, offset: int = 0):
    """
    Current record set (all logs, or the active filter's result).

    Args:
        limit: Maximum number of records to return
        offset: Pagination offset
    """
    session = _current_session()
    records = session.filters.records[offset:]
    if limit is not None:
        records = records[:limit]

    return RecordsResponse(
        filter=_filter_status(session),
        records=[dict(record.fields) for record in records],
    )


@router.get("/api/schema", response_model=List[SchemaField])
async def get_schema():
    """Columns available as filter targets."""
    session = _current_session()
    return [
        SchemaField(name=name, type=column_type.value)
        for name, column_type in session.filters.field_schema
    ]


@router.get("/api/filter", response_model=FilterStatus)
async def get_filter():
    """Current filter state and last error."""
    return _filter_status(_current_session())


@router.post("/api/filter", response_model=FilterStatus)
async def apply_filter(request: FilterRequest):
    """
    Apply a SQL WHERE expression.

    A rejected filter returns 400 and leaves the current result set alone.
    """
    session = _current_session()
    session.filters.apply(request.expression)

    status = _filter_status(session)
    if status.state == "pending":
        raise HTTPException(status_code=400, detail=status.model_dump())
    return status


@router.delete("/api/filter", response_model=FilterStatus)
async def clear_filter():
    """Clear the active filter."""
    session = _current_session()
    session.filters.clear()
    return _filter_status(session)


@router.get("/api/presets", response_model=List[PresetInfo])
async def list_presets():
    """List canned filters."""
    return [
        PresetInfo(name=preset.name, description=preset.description)
        for preset in PRESETS.values()
    ]


@router.post("/api/filter/presets/{name}", response_model=FilterStatus)
async def apply_preset(name: str):
    """Apply a canned filter by name."""
    session = _current_session()
    try:
        session.filters.preset(name)
    except UnknownPresetError:
        raise HTTPException(status_code=404, detail="Preset not found")

    status = _filter_status(session)
    if status.state == "pending":
        raise HTTPException(status_code=400, detail=status.model_dump())
    return status


@router.get("/api/errors", response_model=List[ParseErrorInfo])
async def list_parse_errors():
    """Lines that failed to parse during ingestion."""
    session = _current_session()
    return [
        ParseErrorInfo(line_number=e.line_number, reason=e.reason)
        for e in session.parse_errors
    ]
