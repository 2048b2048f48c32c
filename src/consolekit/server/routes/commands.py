"""Command listing, prediction and execution routes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ...console import is_error_result
from ..schemas import (
    CommandInfo,
    CommandListResponse,
    ExecuteRequest,
    ExecuteResponse,
    HistoryResponse,
    PredictRequest,
    PredictResponse,
)


def build_commands_router(console) -> APIRouter:
    """Build the router exposing the console query API."""

    router = APIRouter()

    @router.get("/api/commands", response_model=CommandListResponse)
    def api_commands() -> CommandListResponse:
        return CommandListResponse(commands=console.get_all_command_names())

    @router.get("/api/commands/{name}", response_model=CommandInfo)
    def api_command_info(name: str) -> CommandInfo:
        info = console.get_command_type_info(name)
        if info is None:
            raise HTTPException(status_code=404, detail=f"Unknown command '{name}'")
        return CommandInfo(name=name.lower(), type_info=info)

    @router.post("/api/predict", response_model=PredictResponse)
    def api_predict(payload: PredictRequest) -> PredictResponse:
        return PredictResponse(candidates=console.predict(payload.input), hint=console.hint(payload.input))

    @router.post("/api/execute", response_model=ExecuteResponse)
    def api_execute(payload: ExecuteRequest) -> ExecuteResponse:
        result = console.execute_command(payload.line)
        return ExecuteResponse(result=result, is_error=is_error_result(result))

    @router.get("/api/history", response_model=HistoryResponse)
    def api_history() -> HistoryResponse:
        return HistoryResponse(entries=console.history.entries())

    return router


__all__ = ["build_commands_router"]
