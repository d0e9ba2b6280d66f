"""
Pydantic models for the treatment decision table.

A rule is a recommendation plus the receptor pattern (and, for early
hormone receptor positive disease, the genetic risk) it applies to. Rules
are grouped by tumor type and stage; each group has one baseline rule that
always fires and an ordered chain of biomarker branches of which at most
one fires.
"""

from pydantic import BaseModel, ConfigDict, Field

from breast_cancer_navigator.models.treatment_models import (
    GeneticRisk,
    ReceptorStatus,
    TumorProfile,
    TumorType,
)


class ReceptorPattern(BaseModel):
    """ER/PR/HER2 combination; a None slot matches either result."""
    model_config = ConfigDict(frozen=True)

    er: ReceptorStatus | None = Field(default=None, description="Required ER status")
    pr: ReceptorStatus | None = Field(default=None, description="Required PR status")
    her2: ReceptorStatus | None = Field(default=None, description="Required HER2 status")

    def matches(self, profile: TumorProfile) -> bool:
        return (
            (self.er is None or profile.er_status == self.er)
            and (self.pr is None or profile.pr_status == self.pr)
            and (self.her2 is None or profile.her2_status == self.her2)
        )

    def describe(self) -> str:
        """Short form such as 'ER+ PR+ HER2-'."""
        parts = []
        for name, status in (("ER", self.er), ("PR", self.pr), ("HER2", self.her2)):
            if status is not None:
                parts.append(name + ("+" if status == ReceptorStatus.POSITIVE else "-"))
        return " ".join(parts) or "any"


class TreatmentRule(BaseModel):
    """One row of the decision table."""
    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Stable identifier, e.g. 'INV-LA-HER2'")
    recommendation: str = Field(..., description="Recommendation text appended when the rule fires")
    receptors: ReceptorPattern | None = Field(
        default=None, description="Receptor pattern; None means always"
    )
    genetic_risk: GeneticRisk | None = Field(
        default=None, description="Required genetic risk; None means any or absent"
    )

    def applies_to(self, profile: TumorProfile) -> bool:
        if self.receptors is not None and not self.receptors.matches(profile):
            return False
        if self.genetic_risk is not None and profile.genetic_risk != self.genetic_risk:
            return False
        return True


class RuleGroup(BaseModel):
    """Rules for one tumor type over a set of stages."""
    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., description="Group identifier")
    tumor_type: TumorType = Field(..., description="Tumor type the group covers")
    stages: frozenset[int] = Field(..., description="Stages the group covers")
    baseline: TreatmentRule = Field(..., description="Rule that always fires for the group")
    branches: tuple[TreatmentRule, ...] = Field(
        default=(),
        description="Biomarker branches in priority order; first match wins",
    )

    def covers(self, profile: TumorProfile) -> bool:
        return profile.tumor_type == self.tumor_type and profile.tumor_stage in self.stages
