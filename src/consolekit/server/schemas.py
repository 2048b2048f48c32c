"""Pydantic schemas used by the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PredictRequest(BaseModel):
    input: str = Field("", description="Partially typed command line")


class PredictResponse(BaseModel):
    candidates: List[str]
    hint: Optional[str] = None


class ExecuteRequest(BaseModel):
    line: str


class ExecuteResponse(BaseModel):
    result: str
    is_error: bool


class CommandInfo(BaseModel):
    name: str
    type_info: str


class CommandListResponse(BaseModel):
    commands: List[str]


class HistoryResponse(BaseModel):
    entries: List[str]


class LogsResponse(BaseModel):
    events: List[Dict[str, Any]]
