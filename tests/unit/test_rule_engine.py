"""
Unit Tests for the Treatment Rule Engine

Tests for every row of the decision table, branch exclusivity and the
explicit no-protocol result.
"""
import pytest

from breast_cancer_navigator.models.treatment_models import (
    GeneticRisk,
    LymphNodeStatus,
    ReceptorStatus,
    TumorSubtype,
    TumorType,
)
from breast_cancer_navigator.services.rule_engine import (
    NO_PROTOCOL_RULE_ID,
    TREATMENT_RULE_GROUPS,
    TreatmentRuleEngine,
    evaluate,
)

POS = ReceptorStatus.POSITIVE
NEG = ReceptorStatus.NEGATIVE

EARLY_SURGERY = "Surgery (lumpectomy or mastectomy), followed by radiation therapy."
NEOADJUVANT = "Neoadjuvant chemotherapy to shrink the tumor, followed by surgery and radiation."
SYSTEMIC = "Systemic therapies to control spread and improve quality of life."


@pytest.fixture
def engine() -> TreatmentRuleEngine:
    return TreatmentRuleEngine()


class TestInSitu:
    """Tests for in-situ tumors."""

    def test_stage_zero(self, make_profile):
        profile = make_profile(tumor_type=TumorType.IN_SITU, tumor_stage=0, genetic_risk=None)

        assert evaluate(profile) == [
            "Lumpectomy or mastectomy, often followed by radiation therapy."
        ]

    @pytest.mark.parametrize("stage", [1, 2, 3, 4])
    def test_uncovered_stages_get_explicit_no_protocol(self, engine, make_profile, stage):
        """In-situ beyond stage 0 is not in the table and says so."""
        profile = make_profile(tumor_type=TumorType.IN_SITU, tumor_stage=stage)

        fired = engine.fire(profile)

        assert [rule.rule_id for rule in fired] == [NO_PROTOCOL_RULE_ID]
        assert fired[0].recommendation == (
            f"No standard treatment protocol is defined for in-situ tumors at stage {stage}. "
            "Discuss individualized options with a multidisciplinary care team."
        )


class TestInvasiveEarly:
    """Tests for invasive stage 1-2."""

    @pytest.mark.parametrize("risk, expected", [
        (GeneticRisk.LOW, "Adjuvant hormone therapy (e.g., Tamoxifen, Aromatase inhibitors)."),
        (GeneticRisk.HIGH, "Chemotherapy followed by hormone therapy."),
    ])
    def test_hormone_receptor_positive_by_risk(self, make_profile, risk, expected):
        profile = make_profile(genetic_risk=risk)

        assert evaluate(profile) == [EARLY_SURGERY, expected]

    def test_hormone_receptor_positive_without_risk(self, engine, make_profile):
        """No genetic risk result: surgery only, no later branch fires."""
        profile = make_profile(tumor_stage=2, genetic_risk=None)

        assert [rule.rule_id for rule in engine.fire(profile)] == ["INV-EARLY"]

    def test_triple_positive_gets_only_combination(self, engine, make_profile):
        """ER+/PR+/HER2+ fires the combination row and not the plain HER2 row."""
        profile = make_profile(her2_status=POS, genetic_risk=None)

        fired = engine.fire(profile)

        assert [rule.rule_id for rule in fired] == ["INV-EARLY", "INV-EARLY-HR-HER2"]
        assert fired[1].recommendation == (
            "Combination of hormone therapy, HER2-targeted therapy (e.g., Trastuzumab), "
            "and chemotherapy."
        )

    def test_er_negative_her2_positive(self, make_profile):
        profile = make_profile(er_status=NEG, pr_status=NEG, her2_status=POS)

        assert evaluate(profile) == [EARLY_SURGERY, "HER2-targeted therapy with chemotherapy."]

    def test_triple_negative(self, make_profile):
        profile = make_profile(er_status=NEG, pr_status=NEG, her2_status=NEG, genetic_risk=None)

        assert evaluate(profile) == [
            EARLY_SURGERY,
            "Chemotherapy is the mainstay, with possible addition of immunotherapy for advanced stages.",
        ]

    def test_er_positive_pr_negative_her2_negative_has_no_branch(self, make_profile):
        profile = make_profile(pr_status=NEG)

        assert evaluate(profile) == [EARLY_SURGERY]


class TestInvasiveLocallyAdvanced:
    """Tests for invasive stage 3."""

    @pytest.mark.parametrize("er, pr, her2, expected", [
        (POS, POS, NEG, "Adjuvant hormone therapy."),
        (POS, POS, POS, "HER2-targeted therapy."),
        (NEG, NEG, POS, "HER2-targeted therapy."),
        (NEG, NEG, NEG, "Chemotherapy."),
    ])
    def test_biomarker_branches(self, make_profile, er, pr, her2, expected):
        profile = make_profile(tumor_stage=3, er_status=er, pr_status=pr, her2_status=her2)

        assert evaluate(profile) == [NEOADJUVANT, expected]

    def test_genetic_risk_ignored(self, make_profile):
        low = evaluate(make_profile(tumor_stage=3, genetic_risk=GeneticRisk.LOW))
        high = evaluate(make_profile(tumor_stage=3, genetic_risk=GeneticRisk.HIGH))
        absent = evaluate(make_profile(tumor_stage=3, genetic_risk=None))

        assert low == high == absent


class TestInvasiveMetastatic:
    """Tests for invasive stage 4."""

    @pytest.mark.parametrize("er, pr, her2, expected", [
        (POS, POS, NEG, "Options include hormone therapy and chemotherapy."),
        (POS, NEG, POS, "Options include HER2-targeted therapy and chemotherapy."),
        (NEG, NEG, NEG, "Options include chemotherapy and immunotherapy."),
    ])
    def test_biomarker_branches(self, make_profile, er, pr, her2, expected):
        profile = make_profile(tumor_stage=4, er_status=er, pr_status=pr, her2_status=her2)

        assert evaluate(profile) == [SYSTEMIC, expected]


class TestTableProperties:
    """Tests for properties that hold across the whole table."""

    def test_invasive_stage_zero_is_explicit(self, engine, make_profile):
        profile = make_profile(tumor_stage=0)

        assert [rule.rule_id for rule in engine.fire(profile)] == [NO_PROTOCOL_RULE_ID]

    @pytest.mark.parametrize("stage, first", [
        (1, EARLY_SURGERY),
        (2, EARLY_SURGERY),
        (3, NEOADJUVANT),
        (4, SYSTEMIC),
    ])
    def test_first_entry_is_stage_guidance(self, make_profile, stage, first):
        for er in (POS, NEG):
            for her2 in (POS, NEG):
                profile = make_profile(tumor_stage=stage, er_status=er, pr_status=er, her2_status=her2)
                assert evaluate(profile)[0] == first

    def test_at_most_one_biomarker_branch_fires(self, engine, make_profile):
        for stage in (1, 2, 3, 4):
            for er in (POS, NEG):
                for pr in (POS, NEG):
                    for her2 in (POS, NEG):
                        for risk in (GeneticRisk.LOW, GeneticRisk.HIGH, None):
                            profile = make_profile(
                                tumor_stage=stage,
                                er_status=er,
                                pr_status=pr,
                                her2_status=her2,
                                genetic_risk=risk,
                            )
                            assert 1 <= len(engine.fire(profile)) <= 2

    def test_subtype_grade_and_nodes_do_not_change_output(self, make_profile):
        baseline = evaluate(make_profile(tumor_stage=2))
        varied = evaluate(make_profile(
            tumor_stage=2,
            tumor_subtype=TumorSubtype.LOBULAR,
            tumor_grade=3,
            lymph_node_status=LymphNodeStatus.PN3,
        ))

        assert varied == baseline

    def test_rule_count(self, engine):
        assert engine.rule_count == 15
        assert engine.rule_groups == TREATMENT_RULE_GROUPS

    def test_empty_table_never_returns_empty_list(self, make_profile):
        engine = TreatmentRuleEngine(rule_groups=())

        assert [rule.rule_id for rule in engine.fire(make_profile())] == [NO_PROTOCOL_RULE_ID]

    def test_deterministic(self, engine, make_profile):
        profile = make_profile(tumor_stage=3, her2_status=POS)

        assert engine.evaluate(profile) == engine.evaluate(profile)
