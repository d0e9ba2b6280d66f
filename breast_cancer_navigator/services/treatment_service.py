"""
Treatment planning entry point.

Runs normalization, validation, rule evaluation and, when asked, side
effect resolution, strictly in that order. A validation failure stops the
pipeline before any rule is evaluated, so an error is never returned with
a partial plan.
"""

from breast_cancer_navigator.config.logging_config import get_logger
from breast_cancer_navigator.models.rule_models import ReceptorPattern
from breast_cancer_navigator.models.treatment_models import (
    PatientInputs,
    TreatmentPlan,
    TumorProfile,
)
from breast_cancer_navigator.services.input_normalizer import normalize_inputs
from breast_cancer_navigator.services.input_validator import require_valid
from breast_cancer_navigator.services.rule_engine import TreatmentRuleEngine, get_rule_engine
from breast_cancer_navigator.services.side_effects import resolve_side_effects

logger = get_logger(__name__)


def compute_treatment(
    inputs: PatientInputs,
    include_side_effects: bool = False,
    engine: TreatmentRuleEngine | None = None,
) -> TreatmentPlan:
    """
    Compute the treatment plan for one patient.

    Args:
        inputs: Raw tumor and biomarker values; stage and grade already integers.
        include_side_effects: Also report side effects of the recommended therapies.
        engine: Rule engine to use. If None, uses the built-in decision table.

    Returns:
        TreatmentPlan; ``side_effects`` is None unless requested.

    Raises:
        ValidationError: A normalized field is outside its allowed values.
    """
    engine = engine or get_rule_engine()

    normalized = normalize_inputs(inputs)
    require_valid(normalized)
    profile = TumorProfile.from_inputs(normalized)

    fired = engine.fire(profile)
    treatment = tuple(rule.recommendation for rule in fired)
    side_effects = resolve_side_effects(treatment) if include_side_effects else None

    logger.info(
        "Treatment plan computed",
        tumor_type=profile.tumor_type.value,
        tumor_stage=profile.tumor_stage,
        receptors=ReceptorPattern(
            er=profile.er_status, pr=profile.pr_status, her2=profile.her2_status
        ).describe(),
        genetic_risk=profile.genetic_risk.value if profile.genetic_risk else None,
        rule_ids=[rule.rule_id for rule in fired],
        side_effect_count=len(side_effects) if side_effects is not None else None,
    )

    return TreatmentPlan(
        treatment=treatment,
        side_effects=side_effects,
        rule_ids=tuple(rule.rule_id for rule in fired),
    )
