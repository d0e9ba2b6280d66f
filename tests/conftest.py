"""
Pytest Configuration and Fixtures

Shared fixtures for treatment planning tests.
"""
import sys
from pathlib import Path
from typing import Callable

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from breast_cancer_navigator.models.treatment_models import (  # noqa: E402
    GeneticRisk,
    LymphNodeStatus,
    PatientInputs,
    ReceptorStatus,
    TumorProfile,
    TumorSubtype,
    TumorType,
)


@pytest.fixture
def make_inputs() -> Callable[..., PatientInputs]:
    """Factory for raw PatientInputs; defaults to an early ER+/PR+/HER2- case."""
    def _make(**overrides) -> PatientInputs:
        values = {
            "tumor_type": "Invasive",
            "tumor_subtype": "Ductal",
            "tumor_stage": 1,
            "tumor_grade": 2,
            "er_status": "Positive",
            "pr_status": "Positive",
            "her2_status": "Negative",
            "lymph_node_status": "cN0",
            "genetic_risk": "Low",
        }
        values.update(overrides)
        return PatientInputs(**values)
    return _make


@pytest.fixture
def make_normalized_inputs() -> Callable[..., PatientInputs]:
    """Factory for PatientInputs already in canonical form."""
    def _make(**overrides) -> PatientInputs:
        values = {
            "tumor_type": "invasive",
            "tumor_subtype": "ductal",
            "tumor_stage": 1,
            "tumor_grade": 2,
            "er_status": "positive",
            "pr_status": "positive",
            "her2_status": "negative",
            "lymph_node_status": "cn0",
            "genetic_risk": "low",
        }
        values.update(overrides)
        return PatientInputs(**values)
    return _make


@pytest.fixture
def make_profile() -> Callable[..., TumorProfile]:
    """Factory for typed TumorProfiles."""
    def _make(**overrides) -> TumorProfile:
        values = {
            "tumor_type": TumorType.INVASIVE,
            "tumor_subtype": TumorSubtype.DUCTAL,
            "tumor_stage": 1,
            "tumor_grade": 2,
            "er_status": ReceptorStatus.POSITIVE,
            "pr_status": ReceptorStatus.POSITIVE,
            "her2_status": ReceptorStatus.NEGATIVE,
            "lymph_node_status": LymphNodeStatus.CN0,
            "genetic_risk": GeneticRisk.LOW,
        }
        values.update(overrides)
        return TumorProfile(**values)
    return _make


@pytest.fixture
def treatment_request_body() -> dict:
    """API request body for an early ER+/PR+/HER2- case, as a form would send it."""
    return {
        "tumor_type": "Invasive",
        "tumor_subtype": "Ductal",
        "tumor_stage": "1",
        "tumor_grade": "2",
        "er_status": "+",
        "pr_status": "+",
        "her2_status": "-",
        "lymph_node_status": "cN0",
        "genetic_risk": "Low",
    }
