"""
Task routes: list the configured script's tasks and run one on a selection.

Routes are ``async def`` so scripts run on the event-loop thread, where the
SIGALRM-based script timeout can fire.
"""

from typing import Any

from fastapi import APIRouter, HTTPException

from text_transformer.core.config import settings
from text_transformer.core.transform import (
    ERROR_PREFIX,
    NO_TASKS_MESSAGE,
    get_script_path,
    load_tasks,
    pick_by_name,
    transform_document,
)
from text_transformer.engines.script import ScriptPathError, TransformerError
from text_transformer.schemas import (
    TaskListResponse,
    TaskPublic,
    TransformRequest,
    TransformResponse,
    TransformResult,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/", response_model=TaskListResponse)
async def list_tasks() -> Any:
    """
    Tasks defined by the configured script, in script order (the picker's items).
    """
    try:
        tasks = load_tasks(get_script_path())
    except ScriptPathError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except TransformerError as e:
        raise HTTPException(status_code=400, detail=f"{ERROR_PREFIX}{e}") from e

    data = [
        TaskPublic(name=t.name, description=t.display_description, index=t.index)
        for t in tasks
    ]
    message = None if data else NO_TASKS_MESSAGE
    return TaskListResponse(success=bool(data), message=message, data=data)


@router.post("/transform", response_model=TransformResponse)
async def transform(body: TransformRequest) -> Any:
    """
    Run the named task on the selection.

    Empty selection, no tasks and unknown task come back as 200 with
    success=false; failures are 422 with the error message as detail.
    """
    if body.script_path is not None and not settings.ALLOW_SCRIPT_PATH_OVERRIDE:
        raise HTTPException(status_code=403, detail="Script path override is disabled")

    document = body.to_document()
    outcome = transform_document(
        document,
        pick_by_name(body.task),
        script_path=body.script_path,
    )
    if outcome.status == "error":
        raise HTTPException(status_code=422, detail=outcome.message)

    data = None
    if outcome.ok:
        data = TransformResult(
            task=outcome.task_name,
            result=outcome.result,
            document_text=document.text,
        )
    return TransformResponse(
        success=outcome.ok,
        status=outcome.status,
        message=outcome.message,
        data=data,
    )
