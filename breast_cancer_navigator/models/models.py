"""
Pydantic models for API request/response validation.

Requests carry form values as typed by the user. Stage and grade may
arrive as text; turning them into integers happens here, at the boundary,
and a failure is reported as non-numeric input rather than as a domain
validation error.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from breast_cancer_navigator.errors import UpstreamParseError
from breast_cancer_navigator.models.treatment_models import PatientInputs, TreatmentPlan

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Genetic risk answers that mean "no result available"
_ABSENT_RISK_VALUES = {"", "none"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_form_integer(field: str, value: Any) -> int:
    """
    Parse a stage or grade form value.

    Raises:
        UpstreamParseError: The value is not an integer or integer text
            (floats, booleans, null and lists included).
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_PATTERN.fullmatch(text):
            return int(text)
    raise UpstreamParseError(field=field, raw_value=value)


class TreatmentPlanRequest(BaseModel):
    """
    Request for a treatment plan.

    Attributes:
        tumor_type: Invasive or in-situ.
        tumor_subtype: Ductal, lobular or other.
        tumor_stage: Stage 0-4, as a number or numeric text.
        tumor_grade: Grade 1-3, as a number or numeric text.
        er_status: ER result, e.g. "Positive" or "+".
        pr_status: PR result.
        her2_status: HER2 result.
        lymph_node_status: cN0-cN3 or pN0-pN3, any case.
        genetic_risk: Low, high, or empty/None when unknown.
        include_side_effects: Report side effects; defaults to the configured default.
    """
    tumor_type: str = Field(..., description="Tumor type")
    tumor_subtype: str = Field(..., description="Tumor subtype")
    tumor_stage: Any = Field(..., description="Tumor stage (0-4)")
    tumor_grade: Any = Field(..., description="Tumor grade (1-3)")
    er_status: str = Field(..., description="ER status")
    pr_status: str = Field(..., description="PR status")
    her2_status: str = Field(..., description="HER2 status")
    lymph_node_status: str = Field(..., description="Lymph node status")
    genetic_risk: str | None = Field(default=None, description="Genetic risk")
    include_side_effects: bool | None = Field(
        default=None,
        description="Include side effects of the recommended therapies"
    )

    @field_validator("genetic_risk")
    @classmethod
    def blank_risk_is_absent(cls, v: str | None) -> str | None:
        """Treat an empty or 'None' answer as no genetic risk result."""
        if v is None or v.strip().lower() in _ABSENT_RISK_VALUES:
            return None
        return v

    def to_patient_inputs(self) -> PatientInputs:
        """
        Build core inputs from the request.

        Raises:
            UpstreamParseError: Stage or grade is not numeric.
        """
        return PatientInputs(
            tumor_type=self.tumor_type,
            tumor_subtype=self.tumor_subtype,
            tumor_stage=parse_form_integer("tumor_stage", self.tumor_stage),
            tumor_grade=parse_form_integer("tumor_grade", self.tumor_grade),
            er_status=self.er_status,
            pr_status=self.pr_status,
            her2_status=self.her2_status,
            lymph_node_status=self.lymph_node_status,
            genetic_risk=self.genetic_risk,
        )


class TreatmentPlanResponse(BaseModel):
    """
    Treatment plan returned to the client.

    Attributes:
        treatment: Recommendations in treatment sequence.
        side_effects: Sorted side effects, or None when not requested.
        rule_ids: Decision table rows behind each recommendation.
        processing_time_ms: Time taken to compute the plan.
    """
    treatment: list[str] = Field(..., description="Recommendations in sequence")
    side_effects: list[str] | None = Field(default=None, description="Side effects, when requested")
    rule_ids: list[str] = Field(default_factory=list, description="Rules that fired")
    processing_time_ms: int = Field(..., ge=0, description="Processing time in milliseconds")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")

    @classmethod
    def from_plan(cls, plan: TreatmentPlan, processing_time_ms: int) -> "TreatmentPlanResponse":
        return cls(
            treatment=list(plan.treatment),
            side_effects=sorted(plan.side_effects) if plan.side_effects is not None else None,
            rule_ids=list(plan.rule_ids),
            processing_time_ms=processing_time_ms,
        )


class FieldOption(BaseModel):
    """Valid options for one form field."""
    field: str = Field(..., description="Request field name")
    label: str = Field(..., description="Human-readable label")
    options: list[Any] = Field(..., description="Valid options in display form")
    optional: bool = Field(default=False, description="Whether the field may be omitted")


class FieldOptionsResponse(BaseModel):
    """Form fields in validation order with their valid options."""
    fields: list[FieldOption] = Field(..., description="Form fields")


class HealthStatus(str, Enum):
    """System health status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """
    Health check response for monitoring.

    Attributes:
        status: Overall system health status.
        version: Application version.
        environment: Deployment environment.
        checks: Individual component health checks.
    """
    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    checks: dict[str, bool] = Field(default_factory=dict, description="Component health checks")


class ErrorResponse(BaseModel):
    """
    Standardized error response.

    Attributes:
        error: Error type/code.
        message: Human-readable error message.
        details: Additional error details.
        request_id: Request ID for tracing.
    """
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict | None = Field(default=None, description="Additional details")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
