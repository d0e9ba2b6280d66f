"""
Pydantic models for patient inputs and treatment plans.

PatientInputs holds the form values as received (and, after normalization,
their canonical lowercase form). TumorProfile is the typed view the rule
engine works on; it can only be built from values the validator accepted.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt


# ============================================================================
# Clinical Vocabularies
# ============================================================================

class TumorType(str, Enum):
    """Invasiveness of the primary tumor."""
    INVASIVE = "invasive"
    IN_SITU = "in-situ"


class TumorSubtype(str, Enum):
    """Histological subtype."""
    DUCTAL = "ductal"
    LOBULAR = "lobular"
    OTHER = "other"


class ReceptorStatus(str, Enum):
    """ER, PR or HER2 receptor result."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


class LymphNodeStatus(str, Enum):
    """Clinical (cN) or pathological (pN) nodal stage, stored lowercase."""
    CN0 = "cn0"
    CN1 = "cn1"
    CN2 = "cn2"
    CN3 = "cn3"
    PN0 = "pn0"
    PN1 = "pn1"
    PN2 = "pn2"
    PN3 = "pn3"

    @property
    def label(self) -> str:
        """Display form, e.g. 'cN0'."""
        return self.value[0] + self.value[1:].upper()


class GeneticRisk(str, Enum):
    """Genomic recurrence risk (e.g. from a multigene assay)."""
    LOW = "low"
    HIGH = "high"


TUMOR_STAGES: tuple[int, ...] = (0, 1, 2, 3, 4)
TUMOR_GRADES: tuple[int, ...] = (1, 2, 3)


# ============================================================================
# Inputs
# ============================================================================

class PatientInputs(BaseModel):
    """
    Tumor and biomarker values for one treatment planning request.

    Text fields are free text until normalized. Stage and grade must
    already be integers; parsing them from form text is the caller's job.
    """
    model_config = ConfigDict(frozen=True)

    tumor_type: str = Field(..., description="Invasive or in-situ")
    tumor_subtype: str = Field(..., description="Ductal, lobular or other")
    tumor_stage: StrictInt = Field(..., description="Stage 0-4")
    tumor_grade: StrictInt = Field(..., description="Grade 1-3")
    er_status: str = Field(..., description="Estrogen receptor status")
    pr_status: str = Field(..., description="Progesterone receptor status")
    her2_status: str = Field(..., description="HER2 status")
    lymph_node_status: str = Field(..., description="cN0-cN3 or pN0-pN3")
    genetic_risk: str | None = Field(
        default=None,
        description="Low or high; None when no genomic risk result is available",
    )


class TumorProfile(BaseModel):
    """Validated, typed tumor profile consumed by the rule engine."""
    model_config = ConfigDict(frozen=True)

    tumor_type: TumorType
    tumor_subtype: TumorSubtype
    tumor_stage: int = Field(..., ge=0, le=4)
    tumor_grade: int = Field(..., ge=1, le=3)
    er_status: ReceptorStatus
    pr_status: ReceptorStatus
    her2_status: ReceptorStatus
    lymph_node_status: LymphNodeStatus
    genetic_risk: GeneticRisk | None = None

    @classmethod
    def from_inputs(cls, inputs: PatientInputs) -> "TumorProfile":
        """Build a profile from normalized, validated inputs."""
        return cls(
            tumor_type=TumorType(inputs.tumor_type),
            tumor_subtype=TumorSubtype(inputs.tumor_subtype),
            tumor_stage=inputs.tumor_stage,
            tumor_grade=inputs.tumor_grade,
            er_status=ReceptorStatus(inputs.er_status),
            pr_status=ReceptorStatus(inputs.pr_status),
            her2_status=ReceptorStatus(inputs.her2_status),
            lymph_node_status=LymphNodeStatus(inputs.lymph_node_status),
            genetic_risk=GeneticRisk(inputs.genetic_risk) if inputs.genetic_risk is not None else None,
        )


# ============================================================================
# Result
# ============================================================================

class TreatmentPlan(BaseModel):
    """
    Ordered treatment recommendations for one profile.

    ``treatment`` order is the order the rules fired, which is also the
    order treatments are given (neoadjuvant before surgery, and so on).
    ``rule_ids`` lines up with ``treatment`` one to one.
    """
    model_config = ConfigDict(frozen=True)

    treatment: tuple[str, ...] = Field(..., description="Recommendations in sequence")
    side_effects: frozenset[str] | None = Field(
        default=None,
        description="Side effects of the recommended therapies, when requested",
    )
    rule_ids: tuple[str, ...] = Field(
        default=(),
        description="Decision table rows that produced each recommendation",
    )
