"""
Side-Effect Resolver Service

Maps treatment categories named in recommendation text to their common
side effects. A category matches when its name appears anywhere in a
recommendation, ignoring case. Overlapping effects (fatigue, nausea) are
reported once.
"""

from collections.abc import Iterable
from types import MappingProxyType

from breast_cancer_navigator.config.logging_config import get_logger

logger = get_logger(__name__)

SIDE_EFFECTS_BY_CATEGORY = MappingProxyType({
    "Hormonal Therapy": (
        "Hot flashes",
        "Vaginal dryness",
        "Mood changes",
        "Fatigue",
        "Nausea",
    ),
    "HER2-targeted Therapy": (
        "Heart problems",
        "Diarrhea",
        "Liver problems",
        "Low white blood cell counts",
        "Fatigue",
    ),
    "Chemotherapy": (
        "Hair loss",
        "Nausea and vomiting",
        "Fatigue",
        "Increased risk of infection",
        "Mouth sores",
        "Loss of appetite",
        "Diarrhea or constipation",
        "Neuropathy",
    ),
    "Immunotherapy": (
        "Fatigue",
        "Skin reactions",
        "Diarrhea",
        "Shortness of breath",
        "Muscle or joint pain",
    ),
    "Targeted Therapy": (
        "Diarrhea",
        "Liver problems",
        "Skin rash",
        "High blood pressure",
        "Blood clotting issues",
    ),
    "Bisphosphonates": (
        "Bone, joint, or muscle pain",
        "Nausea",
        "Constipation",
        "Fatigue",
        "Low calcium levels in the blood",
    ),
})


def matched_categories(treatment: Iterable[str]) -> tuple[str, ...]:
    """Categories named in any recommendation, in table order."""
    texts = [item.lower() for item in treatment]
    return tuple(
        category
        for category in SIDE_EFFECTS_BY_CATEGORY
        if any(category.lower() in text for text in texts)
    )


def resolve_side_effects(treatment: Iterable[str]) -> frozenset[str]:
    """
    Collect side effects for every category named in ``treatment``.

    Returns:
        Deduplicated side effects; empty when no category is named.
    """
    categories = matched_categories(treatment)
    effects: set[str] = set()
    for category in categories:
        effects.update(SIDE_EFFECTS_BY_CATEGORY[category])

    logger.debug(
        "Side effects resolved",
        categories=list(categories),
        effect_count=len(effects),
    )
    return frozenset(effects)
