"""Instance health report models.

The upstream schema belongs to a third-party plugin and changes between
releases, so decoding is lenient: unknown fields are ignored, and a field that
is missing, null or of the wrong type falls back to its default instead of
failing the whole report.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class HealthCheckEntry(BaseModel):
    """A single check reported by the instance health endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = 0
    complete_key: str = Field(default="", alias="completeKey")
    name: str = ""
    description: str = ""
    is_healthy: bool = Field(default=False, alias="isHealthy")
    failure_reason: str = Field(default="", alias="failureReason")
    application: str = ""
    # Epoch millis; never exported as a label
    time: int = 0
    severity: str = ""
    documentation: str = ""
    tag: str = ""
    # Mirrors isHealthy; metric values only use is_healthy
    healthy: bool = False

    @field_validator("*", mode="wrap")
    @classmethod
    def default_on_mismatch(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Replace an undecodable field value with the field default."""
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default


class HealthCheckReport(BaseModel):
    """Body of ``/rest/troubleshooting/1.0/check/``."""

    model_config = ConfigDict(extra="ignore")

    statuses: list[HealthCheckEntry] = Field(default_factory=list)

    @field_validator("statuses", mode="before")
    @classmethod
    def keep_objects(cls, value: Any) -> Any:
        """Treat null as empty and skip entries that are not JSON objects."""
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("statuses must be a list")
        return [item for item in value if isinstance(item, dict)]
