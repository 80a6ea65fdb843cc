from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from offline_queue.api.deps import RuntimeDep

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(runtime: RuntimeDep) -> JSONResponse:
    errors: list[str] = []

    try:
        if not await runtime.kv.ping():
            errors.append("storage: not writable")
    except Exception as exc:  # noqa: BLE001
        errors.append(f"storage: {exc}")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(content={"status": "ready", "online": runtime.monitor.online})
