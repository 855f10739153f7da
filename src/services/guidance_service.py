from __future__ import annotations

from pydantic import BaseModel, Field

from src.core.schemas import ConditionResult, RiskLevel


DESCRIPTIONS = {
    "Calculus": (
        "Calculus, also known as tartar, is hardened plaque that forms on your teeth. "
        "It can only be removed by a dental professional during a cleaning."
    ),
    "Caries": (
        "Caries, commonly known as cavities, are permanently damaged areas in the hard surface "
        "of your teeth that develop into tiny holes."
    ),
    "Gingivitis": (
        "Gingivitis is a mild form of gum disease that causes irritation, redness, and swelling "
        "of your gums around the base of your teeth."
    ),
    "Tooth Discoloration": (
        "Tooth discoloration refers to the staining or darkening of your teeth, which can be "
        "caused by foods, drinks, smoking, or aging."
    ),
    "Mouth Ulcer": (
        "Mouth ulcers are small, painful sores that develop in your mouth or at the base of your gums. "
        "They're usually harmless but can be uncomfortable."
    ),
    "Hypodontia": (
        "Hypodontia is a condition where one or more teeth fail to develop. "
        "It's one of the most common dental developmental abnormalities."
    ),
}
DEFAULT_DESCRIPTION = "A dental condition that requires attention and proper care."

ADVISORIES = {
    RiskLevel.High: (
        "Urgent Attention Required",
        "This condition requires immediate professional attention. "
        "Please schedule an appointment with your dentist as soon as possible.",
    ),
    RiskLevel.Medium: (
        "Monitor Closely",
        "This condition should be monitored and addressed. "
        "Consider scheduling a dental appointment within the next few weeks.",
    ),
    RiskLevel.Low: (
        "Generally Safe",
        "This condition is at a manageable level. "
        "Continue with good oral hygiene and regular dental check-ups.",
    ),
}

# (low-risk actions, elevated-risk actions)
RECOMMENDATIONS: dict[str, tuple[list[str], list[str]]] = {
    "Calculus": (
        [
            "Schedule regular dental cleanings every 6 months",
            "Use tartar-control toothpaste",
            "Brush twice daily with fluoride toothpaste",
            "Floss daily to remove plaque between teeth",
        ],
        [
            "Schedule immediate dental cleaning",
            "Use antimicrobial mouthwash daily",
            "Consider electric toothbrush for better plaque removal",
            "Increase brushing frequency to after every meal",
        ],
    ),
    "Caries": (
        [
            "Use fluoride toothpaste and mouthwash",
            "Limit sugary and acidic foods",
            "Chew sugar-free gum after meals",
            "Schedule regular dental check-ups",
        ],
        [
            "See dentist immediately for treatment",
            "Avoid hot and cold foods that cause pain",
            "Use fluoride supplements if recommended",
            "Consider dental sealants for protection",
        ],
    ),
    "Gingivitis": (
        [
            "Brush gently with soft-bristled toothbrush",
            "Use antibacterial mouthwash",
            "Floss daily to remove plaque",
            "Massage gums gently during brushing",
        ],
        [
            "Schedule professional dental cleaning",
            "Use prescribed antibacterial mouthwash",
            "Consider deep cleaning (scaling and root planing)",
            "Quit smoking if applicable",
        ],
    ),
    "Tooth Discoloration": (
        [
            "Use whitening toothpaste (with ADA approval)",
            "Limit coffee, tea, and red wine consumption",
            "Rinse mouth after consuming staining foods",
            "Consider professional whitening consultation",
        ],
        [
            "Consult dentist for professional whitening",
            "Avoid over-the-counter whitening products",
            "Rule out underlying dental issues",
            "Consider porcelain veneers for severe cases",
        ],
    ),
    "Mouth Ulcer": (
        [
            "Rinse with warm salt water",
            "Use over-the-counter pain relievers",
            "Apply topical anesthetics (benzocaine gels)",
            "Avoid spicy, acidic, or rough foods",
        ],
        [
            "See dentist if ulcers persist over 2 weeks",
            "Use prescription topical corticosteroids",
            "Consider systemic causes (nutritional deficiencies)",
            "Avoid irritating foods completely",
        ],
    ),
    "Hypodontia": (
        [
            "Maintain excellent oral hygiene",
            "Use fluoride treatments to strengthen existing teeth",
            "Consider space maintainers if needed",
            "Regular orthodontic evaluations",
        ],
        [
            "Consult orthodontist for treatment planning",
            "Consider dental implants or bridges",
            "Evaluate for prosthetic replacements",
            "Genetic counseling if family history present",
        ],
    ),
}
DEFAULT_RECOMMENDATIONS = ["Consult with your dentist for personalized advice"]

PREVENTION_TIPS = [
    "Brush teeth twice daily with fluoride toothpaste",
    "Floss daily to remove plaque between teeth",
    "Use mouthwash to kill bacteria and freshen breath",
    "Limit sugary and acidic foods and drinks",
    "Don't use tobacco products",
    "Schedule regular dental check-ups and cleanings",
    "Eat a balanced diet rich in calcium and vitamins",
    "Drink plenty of water throughout the day",
]


class ConditionGuidance(BaseModel):
    name: str
    description: str
    advisory_title: str
    advisory: str
    recommendations: list[str] = Field(default_factory=list)


def recommendations_for(name: str, risk: RiskLevel) -> list[str]:
    pair = RECOMMENDATIONS.get(name)
    if pair is None:
        return list(DEFAULT_RECOMMENDATIONS)
    low, elevated = pair
    return list(low if risk == RiskLevel.Low else elevated)


def guidance_for(condition: ConditionResult) -> ConditionGuidance:
    title, advisory = ADVISORIES[condition.risk]
    return ConditionGuidance(
        name=condition.name,
        description=DESCRIPTIONS.get(condition.name, DEFAULT_DESCRIPTION),
        advisory_title=title,
        advisory=advisory,
        recommendations=recommendations_for(condition.name, condition.risk),
    )
