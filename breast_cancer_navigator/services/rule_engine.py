"""
Treatment Rule Engine.

Deterministic evaluation of a TumorProfile against the breast cancer
treatment decision table. Groups are evaluated top-down; a covering group
appends its baseline recommendation, then the first biomarker branch that
matches. Row order is the tie-break and is part of the table's meaning.

Tumor subtype, grade and lymph node status are validated upstream but do
not currently select any rule.
"""

from functools import lru_cache

from breast_cancer_navigator.config.logging_config import get_logger
from breast_cancer_navigator.models.rule_models import ReceptorPattern, RuleGroup, TreatmentRule
from breast_cancer_navigator.models.treatment_models import (
    GeneticRisk,
    ReceptorStatus,
    TumorProfile,
    TumorType,
)

logger = get_logger(__name__)

POS = ReceptorStatus.POSITIVE
NEG = ReceptorStatus.NEGATIVE

HORMONE_RECEPTOR_POSITIVE = ReceptorPattern(er=POS, pr=POS, her2=NEG)
ER_POSITIVE_HER2_POSITIVE = ReceptorPattern(er=POS, her2=POS)
HER2_POSITIVE = ReceptorPattern(her2=POS)
TRIPLE_NEGATIVE = ReceptorPattern(er=NEG, pr=NEG, her2=NEG)

NO_PROTOCOL_RULE_ID = "NO-PROTOCOL"
NO_PROTOCOL_TEMPLATE = (
    "No standard treatment protocol is defined for {tumor_type} tumors at stage {stage}. "
    "Discuss individualized options with a multidisciplinary care team."
)


# ============================================================================
# Decision Table
# ============================================================================

TREATMENT_RULE_GROUPS: tuple[RuleGroup, ...] = (
    RuleGroup(
        group_id="DCIS",
        tumor_type=TumorType.IN_SITU,
        stages=frozenset({0}),
        baseline=TreatmentRule(
            rule_id="DCIS-0",
            recommendation="Lumpectomy or mastectomy, often followed by radiation therapy.",
        ),
    ),
    RuleGroup(
        group_id="INV-EARLY",
        tumor_type=TumorType.INVASIVE,
        stages=frozenset({1, 2}),
        baseline=TreatmentRule(
            rule_id="INV-EARLY",
            recommendation="Surgery (lumpectomy or mastectomy), followed by radiation therapy.",
        ),
        branches=(
            TreatmentRule(
                rule_id="INV-EARLY-HR-LOW",
                recommendation="Adjuvant hormone therapy (e.g., Tamoxifen, Aromatase inhibitors).",
                receptors=HORMONE_RECEPTOR_POSITIVE,
                genetic_risk=GeneticRisk.LOW,
            ),
            TreatmentRule(
                rule_id="INV-EARLY-HR-HIGH",
                recommendation="Chemotherapy followed by hormone therapy.",
                receptors=HORMONE_RECEPTOR_POSITIVE,
                genetic_risk=GeneticRisk.HIGH,
            ),
            TreatmentRule(
                rule_id="INV-EARLY-HR-HER2",
                recommendation=(
                    "Combination of hormone therapy, HER2-targeted therapy "
                    "(e.g., Trastuzumab), and chemotherapy."
                ),
                receptors=ER_POSITIVE_HER2_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-EARLY-HER2",
                recommendation="HER2-targeted therapy with chemotherapy.",
                receptors=HER2_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-EARLY-TNBC",
                recommendation=(
                    "Chemotherapy is the mainstay, with possible addition of "
                    "immunotherapy for advanced stages."
                ),
                receptors=TRIPLE_NEGATIVE,
            ),
        ),
    ),
    RuleGroup(
        group_id="INV-LA",
        tumor_type=TumorType.INVASIVE,
        stages=frozenset({3}),
        baseline=TreatmentRule(
            rule_id="INV-LA",
            recommendation="Neoadjuvant chemotherapy to shrink the tumor, followed by surgery and radiation.",
        ),
        branches=(
            TreatmentRule(
                rule_id="INV-LA-HR",
                recommendation="Adjuvant hormone therapy.",
                receptors=HORMONE_RECEPTOR_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-LA-HER2",
                recommendation="HER2-targeted therapy.",
                receptors=HER2_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-LA-TNBC",
                recommendation="Chemotherapy.",
                receptors=TRIPLE_NEGATIVE,
            ),
        ),
    ),
    RuleGroup(
        group_id="INV-MET",
        tumor_type=TumorType.INVASIVE,
        stages=frozenset({4}),
        baseline=TreatmentRule(
            rule_id="INV-MET",
            recommendation="Systemic therapies to control spread and improve quality of life.",
        ),
        branches=(
            TreatmentRule(
                rule_id="INV-MET-HR",
                recommendation="Options include hormone therapy and chemotherapy.",
                receptors=HORMONE_RECEPTOR_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-MET-HER2",
                recommendation="Options include HER2-targeted therapy and chemotherapy.",
                receptors=HER2_POSITIVE,
            ),
            TreatmentRule(
                rule_id="INV-MET-TNBC",
                recommendation="Options include chemotherapy and immunotherapy.",
                receptors=TRIPLE_NEGATIVE,
            ),
        ),
    ),
)


def no_protocol_rule(profile: TumorProfile) -> TreatmentRule:
    """Explicit entry for a profile no group covers (in-situ, stage 1-4)."""
    return TreatmentRule(
        rule_id=NO_PROTOCOL_RULE_ID,
        recommendation=NO_PROTOCOL_TEMPLATE.format(
            tumor_type=profile.tumor_type.value,
            stage=profile.tumor_stage,
        ),
    )


class TreatmentRuleEngine:
    """
    Deterministic treatment decision engine.

    Holds an immutable decision table; evaluation has no side effects, so
    one instance can serve concurrent requests.
    """

    def __init__(self, rule_groups: tuple[RuleGroup, ...] | None = None):
        """
        Initialize the engine.

        Args:
            rule_groups: Decision table. If None, uses TREATMENT_RULE_GROUPS.
        """
        self._groups = TREATMENT_RULE_GROUPS if rule_groups is None else tuple(rule_groups)

    @property
    def rule_groups(self) -> tuple[RuleGroup, ...]:
        return self._groups

    @property
    def rule_count(self) -> int:
        return sum(1 + len(group.branches) for group in self._groups)

    def fire(self, profile: TumorProfile) -> list[TreatmentRule]:
        """
        Return the rules that fire for ``profile``, in firing order.

        Never empty: a profile outside every group gets the explicit
        no-protocol rule.
        """
        fired: list[TreatmentRule] = []

        for group in self._groups:
            if not group.covers(profile):
                continue

            fired.append(group.baseline)
            for branch in group.branches:
                if branch.applies_to(profile):
                    fired.append(branch)
                    break

        if not fired:
            logger.warning(
                "No treatment protocol for profile",
                tumor_type=profile.tumor_type.value,
                tumor_stage=profile.tumor_stage,
            )
            fired.append(no_protocol_rule(profile))

        logger.debug(
            "Rules fired",
            rule_ids=[rule.rule_id for rule in fired],
        )
        return fired

    def evaluate(self, profile: TumorProfile) -> list[str]:
        """Ordered recommendation strings for ``profile``."""
        return [rule.recommendation for rule in self.fire(profile)]


@lru_cache
def get_rule_engine() -> TreatmentRuleEngine:
    """Get the shared rule engine over the built-in decision table."""
    return TreatmentRuleEngine()


def evaluate(profile: TumorProfile) -> list[str]:
    """Ordered recommendation strings for ``profile`` from the built-in table."""
    return get_rule_engine().evaluate(profile)
