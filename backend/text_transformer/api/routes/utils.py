from fastapi import APIRouter
from fastapi.responses import JSONResponse

from text_transformer.core.health import liveness_check, readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


def _unavailable(message: str, failures: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": message, "data": failures},
    )


@router.get("/liveness/", response_model=None)
async def liveness() -> bool | JSONResponse:
    """
    Is the transformer service up? Never touches the task script, so a
    broken script does not make the editor plugin think the server is down.
    """
    ok, failures = liveness_check()
    if not ok:
        return _unavailable("Transformer service unhealthy", failures)
    return True


@router.get("/health-check/", response_model=None)
async def health_check() -> bool | JSONResponse:
    """
    Can tasks be listed and run right now?

    Resolves the configured TRANSFORM_SCRIPT_PATH and loads it the same way
    GET /tasks/ does. 503 carries the failing check, e.g.
    "task_script: Script file not found: ...".
    """
    ok, failures = readiness_check()
    if not ok:
        return _unavailable("Task script unavailable", failures)
    return True
