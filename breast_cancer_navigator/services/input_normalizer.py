"""
Input Normalizer Service

Maps free-text form values to the canonical lowercase vocabulary the
validator checks against.

Design:
1. Every text field is lowercased and stripped.
2. Tumor type and receptor fields are then looked up in explicit alias
   tables. A sign is only read as a receptor result when it is the whole
   value or follows the field's own marker name ("ER+", "her2 -"), so a
   hyphen inside some unrelated token is never rewritten.
3. Values with no alias are passed through (lowercased) so the validator
   can echo and reject them.

Normalization is pure and idempotent: canonical values map to themselves.
"""

import re
from types import MappingProxyType

from breast_cancer_navigator.models.treatment_models import PatientInputs

TUMOR_TYPE_ALIASES = MappingProxyType({
    "invasive": "invasive",
    "in-situ": "in-situ",
    "in situ": "in-situ",
    "insitu": "in-situ",
})

RECEPTOR_STATUS_ALIASES = MappingProxyType({
    "positive": "positive",
    "pos": "positive",
    "+": "positive",
    "negative": "negative",
    "neg": "negative",
    "-": "negative",
})

# Marker names each receptor field may be prefixed with
RECEPTOR_MARKERS = MappingProxyType({
    "er_status": ("er",),
    "pr_status": ("pr",),
    "her2_status": ("her2", "her-2"),
})


def _canonical_text(value: str) -> str:
    return value.strip().lower()


def normalize_tumor_type(value: str) -> str:
    text = _canonical_text(value)
    return TUMOR_TYPE_ALIASES.get(text, text)


def normalize_receptor_status(value: str, field: str = "er_status") -> str:
    """
    Normalize an ER/PR/HER2 result.

    Args:
        value: Raw form value, e.g. "Positive", "+", "HER2-".
        field: Which receptor field the value belongs to; selects the
            marker prefixes that may be stripped.

    Returns:
        "positive" or "negative" when the value is recognised, otherwise
        the lowercased value unchanged.
    """
    text = _canonical_text(value)
    if text in RECEPTOR_STATUS_ALIASES:
        return RECEPTOR_STATUS_ALIASES[text]

    for marker in RECEPTOR_MARKERS.get(field, ()):
        match = re.fullmatch(rf"{re.escape(marker)}\s*(.+)", text)
        if match and match.group(1) in RECEPTOR_STATUS_ALIASES:
            return RECEPTOR_STATUS_ALIASES[match.group(1)]

    return text


def normalize_genetic_risk(value: str | None) -> str | None:
    if value is None:
        return None
    return _canonical_text(value)


def normalize_inputs(inputs: PatientInputs) -> PatientInputs:
    """
    Return a copy of ``inputs`` with every text field in canonical form.

    Stage and grade are integers and pass through untouched.
    """
    return inputs.model_copy(update={
        "tumor_type": normalize_tumor_type(inputs.tumor_type),
        "tumor_subtype": _canonical_text(inputs.tumor_subtype),
        "er_status": normalize_receptor_status(inputs.er_status, "er_status"),
        "pr_status": normalize_receptor_status(inputs.pr_status, "pr_status"),
        "her2_status": normalize_receptor_status(inputs.her2_status, "her2_status"),
        "lymph_node_status": _canonical_text(inputs.lymph_node_status),
        "genetic_risk": normalize_genetic_risk(inputs.genetic_risk),
    })
