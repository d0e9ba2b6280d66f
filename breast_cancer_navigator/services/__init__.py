"""Treatment planning pipeline: normalize, validate, evaluate, resolve side effects."""

from breast_cancer_navigator.services.treatment_service import compute_treatment

__all__ = ["compute_treatment"]
