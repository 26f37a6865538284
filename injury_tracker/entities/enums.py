"""
Named option sets shared by form validation, option lists and badge colouring.
"""

from enum import StrEnum


class AthleteStatus(StrEnum):
    active = "Active"
    injured = "Injured"
    recovering = "Recovering"
    retired = "Retired"
    inactive = "Inactive"


class InjurySeverity(StrEnum):
    minor = "Minor"
    moderate = "Moderate"
    severe = "Severe"
    critical = "Critical"


class InjuryStatus(StrEnum):
    active = "Active"
    recovering = "Recovering"
    rehabilitating = "Rehabilitating"
    healed = "Healed"


class InjuryType(StrEnum):
    sprain = "Sprain"
    strain = "Strain"
    fracture = "Fracture"
    dislocation = "Dislocation"
    contusion = "Contusion"
    laceration = "Laceration"
    concussion = "Concussion"
    tendonitis = "Tendonitis"
    ligament_tear = "Ligament Tear"
    muscle_tear = "Muscle Tear"
    overuse_injury = "Overuse Injury"
    other = "Other"


class BodyPart(StrEnum):
    head = "Head"
    neck = "Neck"
    shoulder = "Shoulder"
    upper_arm = "Upper Arm"
    elbow = "Elbow"
    forearm = "Forearm"
    wrist = "Wrist"
    hand = "Hand"
    fingers = "Fingers"
    chest = "Chest"
    upper_back = "Back (Upper)"
    lower_back = "Back (Lower)"
    abdomen = "Abdomen"
    hip = "Hip"
    groin = "Groin"
    thigh = "Thigh"
    knee = "Knee"
    lower_leg = "Lower Leg"
    ankle = "Ankle"
    foot = "Foot"
    toes = "Toes"
    other = "Other"


class TreatmentType(StrEnum):
    physical_therapy = "Physical Therapy"
    surgery = "Surgery"
    medication = "Medication"
    massage = "Massage"
    acupuncture = "Acupuncture"
    chiropractic = "Chiropractic"
    ice_heat = "Ice/Heat"
    rest = "Rest"
    rehabilitation_exercise = "Rehabilitation Exercise"
    stretching = "Stretching"
    taping_bracing = "Taping/Bracing"
    cortisone_injection = "Cortisone Injection"
    ultrasound = "Ultrasound"
    electrical_stimulation = "Electrical Stimulation"
    other = "Other"


class TreatmentResult(StrEnum):
    excellent = "Excellent - Complete Recovery"
    good = "Good - Significant Improvement"
    moderate = "Moderate - Partial Improvement"
    poor = "Poor - Minimal Improvement"
    no_change = "No Change"
    worse = "Worse"
    too_early = "Too Early to Assess"


def options(enum_cls: type[StrEnum]) -> list[str]:
    """Option values in declaration order, as offered by the forms."""
    return [member.value for member in enum_cls]


# Badge colours keyed by lower-cased option value.
ATHLETE_STATUS_BADGES: dict[str, str] = {
    AthleteStatus.active.lower(): "success",
    AthleteStatus.injured.lower(): "danger",
    AthleteStatus.recovering.lower(): "warning",
    AthleteStatus.retired.lower(): "secondary",
}

INJURY_SEVERITY_BADGES: dict[str, str] = {
    InjurySeverity.minor.lower(): "success",
    InjurySeverity.moderate.lower(): "warning",
    InjurySeverity.severe.lower(): "danger",
    InjurySeverity.critical.lower(): "dark",
}

INJURY_STATUS_BADGES: dict[str, str] = {
    InjuryStatus.active.lower(): "danger",
    InjuryStatus.recovering.lower(): "warning",
    InjuryStatus.rehabilitating.lower(): "info",
    InjuryStatus.healed.lower(): "success",
}

# Result is free text, so colours are picked by keyword; first match wins.
TREATMENT_RESULT_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("excellent", "complete"), "success"),
    (("good", "significant"), "info"),
    (("moderate", "partial"), "warning"),
    (("poor", "minimal"), "danger"),
]


def _lookup(table: dict[str, str], value, default: str) -> str:
    if not isinstance(value, str):
        return default
    return table.get(value.lower(), default)


def athlete_status_badge(status) -> str:
    return _lookup(ATHLETE_STATUS_BADGES, status, "info")


def injury_severity_badge(severity) -> str:
    return _lookup(INJURY_SEVERITY_BADGES, severity, "info")


def injury_status_badge(status) -> str:
    return _lookup(INJURY_STATUS_BADGES, status, "secondary")


def treatment_result_badge(result) -> str:
    if not isinstance(result, str) or not result:
        return "secondary"
    lowered = result.lower()
    for keywords, colour in TREATMENT_RESULT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return colour
    return "secondary"
