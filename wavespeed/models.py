from enum import Enum
from typing import Any, Type

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .errors import APIError

SUCCESS_CODE = 200


class PredictionStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({PredictionStatus.COMPLETED, PredictionStatus.FAILED})


class PredictionUrls(BaseModel):
    model_config = ConfigDict(extra="ignore")

    get: str | None = None


class PredictionData(BaseModel):
    """Snapshot of one remote prediction as returned in an envelope's ``data``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    model: str | None = None
    status: PredictionStatus = Field(description="created|processing|completed|failed")
    input: dict[str, Any] = Field(default_factory=dict)
    outputs: list[str] = Field(default_factory=list)
    urls: PredictionUrls | None = None
    has_nsfw_contents: list[bool] = Field(default_factory=list)
    created_at: str | None = None
    error: str | None = None
    execution_time: float | None = Field(default=None, alias="executionTime")

    @field_validator("input", "outputs", "has_nsfw_contents", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "input" else []
        return value


class Envelope(BaseModel):
    """Outer wrapper the service puts around every payload."""

    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    message: str | None = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        error_cls: Type[APIError],
        *,
        require_success: bool = False,
    ) -> "Envelope":
        """Parse a response body, raising ``error_cls`` with status and body on anything unusable."""
        if not response.is_success:
            raise error_cls(response.status_code, response.text)
        try:
            envelope = cls.model_validate(response.json())
        except (ValueError, ValidationError):
            raise error_cls(response.status_code, response.text) from None
        if require_success and not envelope.ok:
            raise error_cls(response.status_code, response.text)
        return envelope


class UploadResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    download_url: str
    filename: str | None = None
    size: int | None = None
