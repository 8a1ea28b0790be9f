from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, Field, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Custom Text Transformer"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: HttpUrl | None = None

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Workspace the editor has open; relative script paths are resolved against it.
    WORKSPACE_ROOT: str | None = None
    # Task script path: relative to WORKSPACE_ROOT or absolute.
    TRANSFORM_SCRIPT_PATH: str | None = None
    # Wall-clock budget (seconds) for a script's module body and for each transform call.
    SCRIPT_EXEC_TIMEOUT: float = Field(default=1.0, gt=0)
    # Let POST /tasks/transform name a script other than TRANSFORM_SCRIPT_PATH.
    ALLOW_SCRIPT_PATH_OVERRIDE: bool = False


settings = Settings()  # type: ignore
