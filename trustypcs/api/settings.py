"""Settings endpoints."""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from trustypcs.api.auth import require_settings_writer
from trustypcs.core.errors import InvalidSettingKey
from trustypcs.core.settings_store import SettingsStore
from trustypcs.core.values import prepare_updates

logger = logging.getLogger(__name__)

router = APIRouter()

SETTINGS_PREFIX = "/api/settings"
ALLOWED_METHODS = "GET, PATCH, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def cors_headers(request: Request) -> Dict[str, str]:
    """Headers attached to every settings response."""
    return {
        "Access-Control-Allow-Origin": request.app.state.config.cors_allow_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


def json_response(request: Request, status_code: int, content: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers(request))


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    return json_response(request, status_code, {"success": False, "error": message})


def is_settings_path(path: str) -> bool:
    return path == SETTINGS_PREFIX or path.startswith(SETTINGS_PREFIX + "/")


def method_not_allowed(request: Request) -> JSONResponse:
    return json_response(request, 405, {"error": "Method not allowed"})


def get_store(request: Request) -> SettingsStore:
    """Settings store owned by the application."""
    return request.app.state.settings_store


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_body(raw: bytes) -> Any:
    """Decode a request body; an empty body is an empty update."""
    if not raw.strip():
        return {}
    return json.loads(raw, parse_constant=_reject_constant)


@router.options("")
def settings_preflight(request: Request):
    """CORS preflight."""
    return Response(
        status_code=200,
        content="",
        media_type="application/json",
        headers=cors_headers(request),
    )


@router.get("")
def get_settings(request: Request, store: SettingsStore = Depends(get_store)):
    """Get all settings."""
    try:
        settings = store.as_dict()
    except Exception as e:
        logger.exception("Failed to fetch settings")
        return error_response(request, 500, str(e))
    return json_response(request, 200, {"success": True, "settings": settings})


@router.patch("")
async def update_settings(
    request: Request,
    store: SettingsStore = Depends(get_store),
    current_user=Depends(require_settings_writer),
):
    """Update settings in one batch."""
    try:
        body = parse_body(await request.body())
    except (ValueError, RecursionError):
        return error_response(request, 400, "Invalid JSON")

    if not isinstance(body, dict):
        return error_response(request, 400, "Invalid settings format")

    try:
        updates = prepare_updates(body)
    except InvalidSettingKey as e:
        return error_response(request, 400, str(e))

    try:
        applied = await run_in_threadpool(store.update_settings, updates)
    except Exception as e:
        logger.exception("Failed to update settings")
        return error_response(request, 500, str(e))

    if applied:
        actor = current_user.get("sub") if current_user else "anonymous"
        logger.info(f"Settings updated by {actor}: {', '.join(sorted(applied))}")
    return json_response(
        request,
        200,
        {"success": True, "message": "Settings updated successfully", "settings": applied},
    )


@router.get("/{key}")
def get_setting(key: str, request: Request, store: SettingsStore = Depends(get_store)):
    """Get setting by key."""
    try:
        setting = store.get_setting(key)
    except Exception as e:
        logger.exception(f"Failed to fetch setting {key}")
        return error_response(request, 500, str(e))
    if not setting:
        return error_response(request, 404, "Setting not found")
    return json_response(
        request,
        200,
        {"success": True, "setting": {"key": setting.key_name, "value": setting.value}},
    )
