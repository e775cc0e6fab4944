"""Centralized configuration for catalog-api using Pydantic Settings."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_api.domain.model import INTERNAL_ID_FIELD
from catalog_api.service_layer.formatter import DEFAULT_FIELDS


class ObservabilityCollectorConfig(BaseModel):
    """Configuration for OTLP trace export."""

    model_config = {"extra": "forbid"}

    enabled: Annotated[bool, Field(description="Enable OTLP trace export to an external collector")] = False

    otlp_protocol: Annotated[Literal["http", "grpc"], Field(description="OTLP transport protocol")] = "grpc"

    collector_endpoint: Annotated[
        str,
        Field(
            description="OTLP collector endpoint (HTTP uses /v1/traces)",
            examples=["http://localhost:4317", "http://localhost:4318/v1/traces"],
        ),
    ] = "http://localhost:4317"

    headers: dict[str, str] = Field(default_factory=dict, description="Optional headers for OTLP requests")

    timeout_seconds: Annotated[int, Field(ge=1, le=60, description="OTLP exporter timeout in seconds")] = 10

    grpc_insecure: Annotated[bool, Field(description="Allow insecure gRPC (plaintext) connections")] = True

    resource_attributes: dict[str, str] = Field(
        default_factory=dict, description="Additional OpenTelemetry resource attributes"
    )


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Response schema
    default_fields: str = Field(
        default=",".join(DEFAULT_FIELDS),
        description="Comma-separated fields returned when a query does not request any",
    )
    internal_id_field: str = Field(
        default=INTERNAL_ID_FIELD, min_length=1, description="Storage identifier stripped from every response"
    )
    etags_collection: str = Field(default="etags", min_length=1, description="Collection holding cache validators")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Tracing export
    otlp_enabled: bool = Field(default=False, description="Export traces to an OTLP collector")
    otlp_protocol: Literal["http", "grpc"] = Field(default="grpc", description="OTLP transport protocol")
    otlp_endpoint: str = Field(default="http://localhost:4317", description="OTLP collector endpoint")
    otlp_timeout_seconds: int = Field(default=10, ge=1, le=60, description="OTLP exporter timeout in seconds")

    @field_validator("default_fields")
    @classmethod
    def _check_default_fields(cls, value: str) -> str:
        if not any(field.strip() for field in value.split(",")):
            raise ValueError("DEFAULT_FIELDS must name at least one field")
        return value

    def get_default_fields(self) -> tuple[str, ...]:
        """Default projection as an immutable tuple, blanks dropped."""
        return tuple(field.strip() for field in self.default_fields.split(",") if field.strip())

    def get_collector_config(self) -> ObservabilityCollectorConfig:
        return ObservabilityCollectorConfig(
            enabled=self.otlp_enabled,
            otlp_protocol=self.otlp_protocol,
            collector_endpoint=self.otlp_endpoint,
            timeout_seconds=self.otlp_timeout_seconds,
        )
