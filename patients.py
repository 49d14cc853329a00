"""
patient data model and synthetic patient fixture for the clinical risk dashboard
all records are generated in-process, nothing is persisted
"""
from dataclasses import dataclass
from datetime import datetime, date, timedelta
from typing import Optional, List
from enum import Enum
import calendar
import logging
import math
import random
from models import RiskFactor, TimelinePoint

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    """coarse risk category derived from the risk score"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    @property
    def score_band(self) -> tuple:
        """inclusive (min, max) risk score range for this level"""
        return {
            RiskLevel.HIGH: (80, 100),
            RiskLevel.MEDIUM: (50, 79),
            RiskLevel.LOW: (10, 49)
        }[self]
    @property
    def display_name(self) -> str:
        return f"{self.value.capitalize()} Risk"


class Gender(Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


# fixed vocabulary, patients get 1-3 of these
CONDITIONS = [
    "Hypertension",
    "Diabetes Type 2",
    "Obesity",
    "Heart Disease",
    "Asthma",
    "COPD",
    "Depression",
    "Anxiety",
    "Arthritis",
    "Chronic Kidney Disease",
]
# risk draw partition: r < 0.25 high, r < 0.60 medium, else low
HIGH_RISK_CUTOFF = 0.25
MEDIUM_RISK_CUTOFF = 0.60
MIN_AGE = 20
MAX_AGE = 80
MAX_CONDITIONS = 3
CHECKUP_WINDOW_DAYS = 183  # ~6 months
# chart reference lines
HIGH_RISK_THRESHOLD = 80
MEDIUM_RISK_THRESHOLD = 50
MAX_TIMELINE_MONTHS = 24


@dataclass(frozen=True)
class ContactInfo:
    """display-only contact details, never validated"""
    email: str
    phone: str


@dataclass(frozen=True)
class Patient:
    """
    patient record shown on the dashboard roster
    risk_score always falls inside risk_level.score_band (enforced by the generator)
    """
    id: str
    name: str
    age: int
    gender: Gender
    risk_level: RiskLevel
    risk_score: int
    conditions: tuple
    last_checkup: date
    contact_info: ContactInfo

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level == RiskLevel.HIGH

    def has_condition(self, condition: str) -> bool:
        return condition in self.conditions

    def to_dict(self) -> dict:
        return {
            "id": self.id, "name": self.name, "age": self.age, "gender": self.gender.value,
            "risk_level": self.risk_level.value, "risk_score": self.risk_score,
            "conditions": list(self.conditions), "last_checkup": self.last_checkup.isoformat(),
            "contact_info": {"email": self.contact_info.email, "phone": self.contact_info.phone}
        }


@dataclass(frozen=True)
class RiskDistribution:
    """patient counts per risk level, recomputed from the roster"""
    high: int = 0
    medium: int = 0
    low: int = 0
    @property
    def total(self) -> int:
        return self.high + self.medium + self.low

    def percentage(self, level: RiskLevel) -> int:
        """rounded share of the roster at this level (0 for an empty roster)"""
        if self.total == 0:
            return 0
        count = {RiskLevel.HIGH: self.high, RiskLevel.MEDIUM: self.medium, RiskLevel.LOW: self.low}[level]
        return round(count / self.total * 100)

    def to_dict(self) -> dict:
        return {
            "high": self.high, "medium": self.medium, "low": self.low, "total": self.total,
            "percentages": {level.value: self.percentage(level) for level in RiskLevel}
        }


def _draw_risk(rng: random.Random):
    """pick a risk level and a score inside its band"""
    r = rng.random()
    if r < HIGH_RISK_CUTOFF:
        level = RiskLevel.HIGH
    elif r < MEDIUM_RISK_CUTOFF:
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.LOW
    low, high = level.score_band
    return level, rng.randint(low, high)


def _draw_conditions(rng: random.Random) -> tuple:
    # unbiased shuffle, then take a prefix of 1-3
    shuffled = rng.sample(CONDITIONS, len(CONDITIONS))
    return tuple(shuffled[:rng.randint(1, MAX_CONDITIONS)])


def _draw_phone(rng: random.Random) -> str:
    return f"({rng.randint(100, 999)}) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


def generate_patients(count: int, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> List[Patient]:
    """
    build `count` synthetic patients with sequential ids P1001, P1002, ...
    not deterministic unless a seeded rng is passed in
    """
    rng = rng or random.Random()
    today = (now or datetime.now()).date()
    patients = []
    for i in range(1, count + 1):
        risk_level, risk_score = _draw_risk(rng)
        conditions = _draw_conditions(rng)
        last_checkup = today - timedelta(days=rng.randint(0, CHECKUP_WINDOW_DAYS))
        patients.append(Patient(
            id=f"P{1000 + i}",
            name=f"Patient {i}",
            age=rng.randint(MIN_AGE, MAX_AGE),
            gender=Gender.MALE if rng.random() > 0.5 else Gender.FEMALE,
            risk_level=risk_level,
            risk_score=risk_score,
            conditions=conditions,
            last_checkup=last_checkup,
            contact_info=ContactInfo(email=f"patient{i}@example.com", phone=_draw_phone(rng))
        ))
    logger.info("generated %d patients", len(patients))
    return patients


def compute_risk_distribution(patients: List[Patient]) -> RiskDistribution:
    """count patients per risk level"""
    return RiskDistribution(
        high=sum(1 for p in patients if p.risk_level == RiskLevel.HIGH),
        medium=sum(1 for p in patients if p.risk_level == RiskLevel.MEDIUM),
        low=sum(1 for p in patients if p.risk_level == RiskLevel.LOW)
    )


def risk_factors(patient: Patient) -> List[RiskFactor]:
    """
    contributing factors for the detail view
    conditions first (impact depends on the condition and the rest of the record), then age
    """
    factors = []
    for condition in patient.conditions:
        impact = RiskLevel.MEDIUM
        if condition in ("Heart Disease", "Chronic Kidney Disease"):
            impact = RiskLevel.HIGH
        elif condition == "Hypertension" and patient.has_condition("Diabetes Type 2"):
            impact = RiskLevel.HIGH
        elif condition in ("Asthma", "Arthritis"):
            impact = RiskLevel.LOW
        factors.append(RiskFactor(factor=condition, impact=impact.value))
    if patient.age > 65:
        factors.append(RiskFactor(
            factor="Age above 65",
            impact=RiskLevel.HIGH.value if patient.age > 75 else RiskLevel.MEDIUM.value
        ))
    return factors


def recommendations(patient: Patient) -> List[str]:
    """intervention recommendations driven by conditions and risk level"""
    recs = []
    if patient.has_condition("Hypertension"):
        recs.append("Regular blood pressure monitoring")
        recs.append("Dietary sodium reduction plan")
    if patient.has_condition("Diabetes Type 2"):
        recs.append("HbA1c level check every 3 months")
        recs.append("Referral to diabetic education program")
    if patient.has_condition("Heart Disease"):
        recs.append("Cardiology follow-up within 2 weeks")
        recs.append("Echocardiogram evaluation")
    if patient.has_condition("Obesity"):
        recs.append("Nutritional counseling referral")
        recs.append("Structured weight management program")
    if patient.is_high_risk:
        recs.append("Weekly telehealth check-ins")
        recs.append("Comprehensive medication review")
    # always at least a couple of general items
    if len(recs) < 2:
        recs.append("Regular wellness check-ups")
        recs.append("Health education resources")
    return recs


def _months_back(today: date, months: int) -> date:
    """same day-of-month `months` ago, clamped to the end of shorter months"""
    year, month = divmod(today.month - 1 - months, 12)
    year += today.year
    month += 1
    return date(year, month, min(today.day, calendar.monthrange(year, month)[1]))


def risk_timeline(patient: Patient, months: int = 6, rng: Optional[random.Random] = None,
                  now: Optional[datetime] = None) -> List[TimelinePoint]:
    """
    monthly risk score history, oldest first
    shape depends on the risk level: high swings widest, medium oscillates, low stays flat
    the latest point is always the patient's current score
    """
    if not 1 <= months <= MAX_TIMELINE_MONTHS:
        raise ValueError(f"months must be between 1 and {MAX_TIMELINE_MONTHS}, got {months}")
    rng = rng or random.Random()
    today = (now or datetime.now()).date()
    points = []
    for i in range(months - 1, -1, -1):
        if patient.risk_level == RiskLevel.HIGH:
            base = 60 + i * 6
            variance = rng.uniform(-5, 5)
        elif patient.risk_level == RiskLevel.MEDIUM:
            base = 50 + math.sin(i) * 10
            variance = rng.uniform(-4, 4)
        else:
            base = 30 + (-2 if i < 3 else 2)
            variance = rng.uniform(-3, 3)
        score = patient.risk_score if i == 0 else round(base + variance)
        point_date = _months_back(today, i)
        points.append(TimelinePoint(
            month=point_date.strftime("%b"),
            score=max(10, min(100, score)),
            full_date=point_date
        ))
    return points
