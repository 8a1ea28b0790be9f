"""
Pydantic schemas for the task-listing and transformation APIs.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from text_transformer.engines.script import EditorDocument, Position, SelectionRange


class PositionIn(BaseModel):
    line: int = Field(..., ge=0)
    character: int = Field(..., ge=0)


class SelectionIn(BaseModel):
    """Selection bounds, zero-based. start must not come after end."""

    start: PositionIn
    end: PositionIn

    @model_validator(mode="after")
    def start_before_end(self) -> "SelectionIn":
        if (self.start.line, self.start.character) > (self.end.line, self.end.character):
            raise ValueError("selection start must not come after selection end")
        return self


class TaskPublic(BaseModel):
    name: str
    description: str
    index: int


class TaskListResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: list[TaskPublic] = Field(default_factory=list)


class TransformRequest(BaseModel):
    """Body for POST /tasks/transform."""

    task: str | None = Field(
        default=None,
        description="Name of the task to run. Omitted or unknown means nothing is picked.",
    )
    file_name: str = Field(..., min_length=1, description="Absolute path of the edited document.")
    selection: SelectionIn
    selected_text: str | None = Field(
        default=None,
        description="Selected text; ignored when document_text is given.",
    )
    document_text: str | None = Field(
        default=None,
        description="Full document text; the selection is sliced from it and the edited text returned.",
    )
    script_path: str | None = Field(
        default=None,
        description="Task script to use instead of TRANSFORM_SCRIPT_PATH (needs ALLOW_SCRIPT_PATH_OVERRIDE).",
    )

    def to_document(self) -> EditorDocument:
        return EditorDocument(
            file_name=self.file_name,
            selection=SelectionRange(
                start=Position(self.selection.start.line, self.selection.start.character),
                end=Position(self.selection.end.line, self.selection.end.character),
            ),
            text=self.document_text,
            selected_text=self.selected_text,
        )


class TransformResult(BaseModel):
    task: str | None = None
    result: str | None = None
    document_text: str | None = None


class TransformResponse(BaseModel):
    success: bool
    status: Literal["success", "warning", "cancelled"]
    message: str | None = None
    data: TransformResult | None = None
