"""Pydantic models for inputs, rules, plans and API payloads."""

from breast_cancer_navigator.models.treatment_models import (
    GeneticRisk,
    LymphNodeStatus,
    PatientInputs,
    ReceptorStatus,
    TreatmentPlan,
    TumorProfile,
    TumorSubtype,
    TumorType,
)

__all__ = [
    "GeneticRisk",
    "LymphNodeStatus",
    "PatientInputs",
    "ReceptorStatus",
    "TreatmentPlan",
    "TumorProfile",
    "TumorSubtype",
    "TumorType",
]
