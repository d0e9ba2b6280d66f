"""
Input Validator Service

Checks normalized PatientInputs against the closed set of values each
field accepts. Fields are checked in form order and validation stops at
the first failure, so the user always sees one message about the first
field to fix.
"""

from dataclasses import dataclass
from typing import Any

from breast_cancer_navigator.config.logging_config import get_logger
from breast_cancer_navigator.errors import ValidationError
from breast_cancer_navigator.models.treatment_models import (
    TUMOR_GRADES,
    TUMOR_STAGES,
    GeneticRisk,
    LymphNodeStatus,
    PatientInputs,
    ReceptorStatus,
    TumorSubtype,
    TumorType,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldCheck:
    """Allowed values for one input field."""

    field: str
    label: str
    valid_values: tuple[Any, ...]
    display_options: tuple[Any, ...]
    options_text: str
    optional: bool = False

    def accepts(self, value: Any) -> bool:
        if value is None:
            return self.optional
        # bool is an int subclass; True must not pass as stage 1
        if isinstance(value, bool):
            return False
        return value in self.valid_values

    def message_for(self, value: Any) -> str:
        return f"Invalid {self.label}: {value}. Valid options are {self.options_text}."


@dataclass(frozen=True)
class FieldViolation:
    """The first field that failed validation."""

    field: str
    value: Any
    valid_options: list[Any]
    message: str

    def to_error(self) -> ValidationError:
        return ValidationError(
            message=self.message,
            field=self.field,
            value=self.value,
            valid_options=self.valid_options,
        )


_RECEPTOR_VALUES = tuple(status.value for status in ReceptorStatus)
_RECEPTOR_OPTIONS_TEXT = "'Positive' or 'Negative'"

# Order matters: the first failing field is the one reported.
FIELD_CHECKS: tuple[FieldCheck, ...] = (
    FieldCheck(
        field="tumor_type",
        label="tumor type",
        valid_values=tuple(t.value for t in TumorType),
        display_options=("Invasive", "In-situ"),
        options_text="'Invasive' or 'In-situ'",
    ),
    FieldCheck(
        field="tumor_subtype",
        label="tumor subtype",
        valid_values=tuple(s.value for s in TumorSubtype),
        display_options=("Ductal", "Lobular", "Other"),
        options_text="'Ductal', 'Lobular', or 'Other'",
    ),
    FieldCheck(
        field="tumor_stage",
        label="tumor stage",
        valid_values=TUMOR_STAGES,
        display_options=TUMOR_STAGES,
        options_text="0, 1, 2, 3, or 4",
    ),
    FieldCheck(
        field="tumor_grade",
        label="tumor grade",
        valid_values=TUMOR_GRADES,
        display_options=TUMOR_GRADES,
        options_text="1, 2, or 3",
    ),
    FieldCheck(
        field="er_status",
        label="ER status",
        valid_values=_RECEPTOR_VALUES,
        display_options=("Positive", "Negative"),
        options_text=_RECEPTOR_OPTIONS_TEXT,
    ),
    FieldCheck(
        field="pr_status",
        label="PR status",
        valid_values=_RECEPTOR_VALUES,
        display_options=("Positive", "Negative"),
        options_text=_RECEPTOR_OPTIONS_TEXT,
    ),
    FieldCheck(
        field="her2_status",
        label="HER2 status",
        valid_values=_RECEPTOR_VALUES,
        display_options=("Positive", "Negative"),
        options_text=_RECEPTOR_OPTIONS_TEXT,
    ),
    FieldCheck(
        field="lymph_node_status",
        label="lymph node status",
        valid_values=tuple(n.value for n in LymphNodeStatus),
        display_options=tuple(n.label for n in LymphNodeStatus),
        options_text="'cN0', 'cN1', 'cN2', 'cN3', 'pN0', 'pN1', 'pN2', or 'pN3'",
    ),
    FieldCheck(
        field="genetic_risk",
        label="genetic risk",
        valid_values=tuple(r.value for r in GeneticRisk),
        display_options=("Low", "High", None),
        options_text="'Low', 'High', or None",
        optional=True,
    ),
)


def first_violation(inputs: PatientInputs) -> FieldViolation | None:
    """Return the first field that fails its check, or None if all pass."""
    for check in FIELD_CHECKS:
        value = getattr(inputs, check.field)
        if not check.accepts(value):
            return FieldViolation(
                field=check.field,
                value=value,
                valid_options=list(check.display_options),
                message=check.message_for(value),
            )
    return None


def validate(inputs: PatientInputs) -> tuple[bool, str | None]:
    """
    Validate normalized inputs.

    Returns:
        (is_valid, error_message) - error_message is None when valid
    """
    violation = first_violation(inputs)
    if violation is None:
        return True, None
    return False, violation.message


def require_valid(inputs: PatientInputs) -> None:
    """Raise ValidationError for the first invalid field."""
    violation = first_violation(inputs)
    if violation is not None:
        logger.info(
            "Input validation failed",
            field=violation.field,
            value=violation.value,
        )
        raise violation.to_error()


def field_options() -> list[dict[str, Any]]:
    """Ordered field/option table, e.g. for rendering form pickers."""
    return [
        {
            "field": check.field,
            "label": check.label,
            "options": list(check.display_options),
            "optional": check.optional,
        }
        for check in FIELD_CHECKS
    ]
