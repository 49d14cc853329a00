"""
multi-criteria patient filtering for the roster view

a patient is shown when every predicate passes:
  - free-text query against name, id and condition labels (case-insensitive)
  - risk level selection
  - inclusive age range
  - condition selection (substring match against the patient's conditions)
  - tab scope (high-risk tab only shows high-risk patients)
empty selections pass everything; output keeps the input order
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging
from patients import Patient, RiskLevel

logger = logging.getLogger(__name__)


class PatientTab(Enum):
    ALL = "all"
    HIGH_RISK = "high-risk"


class AgeRangePreset(Enum):
    """age buckets offered by the filter popover"""
    ALL = "all"
    AGE_18_30 = "18-30"
    AGE_31_50 = "31-50"
    AGE_51_70 = "51-70"
    AGE_71_PLUS = "71+"
    @property
    def bounds(self) -> Optional[Tuple[int, int]]:
        """inclusive (min, max), None for no constraint; 71+ is capped at 120"""
        return {
            AgeRangePreset.ALL: None,
            AgeRangePreset.AGE_18_30: (18, 30),
            AgeRangePreset.AGE_31_50: (31, 50),
            AgeRangePreset.AGE_51_70: (51, 70),
            AgeRangePreset.AGE_71_PLUS: (71, 120)
        }[self]


def parse_age_range(label: Optional[str]) -> Optional[Tuple[int, int]]:
    """preset label -> bounds; unknown or missing labels clear the filter"""
    if not label:
        return None
    try:
        return AgeRangePreset(label).bounds
    except ValueError:
        return None


@dataclass(frozen=True)
class PatientFilters:
    """
    structured filter selection
    immutable so two selections with the same contents compare (and hash) equal
    """
    risk_levels: frozenset = frozenset()
    age_range: Optional[Tuple[int, int]] = None
    conditions: Tuple[str, ...] = ()

    @classmethod
    def create(cls, risk_levels: Iterable[RiskLevel] = (), age_range: Optional[Tuple[int, int]] = None,
               conditions: Iterable[str] = ()) -> "PatientFilters":
        return cls(
            risk_levels=frozenset(risk_levels),
            age_range=tuple(age_range) if age_range is not None else None,
            conditions=tuple(conditions)
        )

    @property
    def is_empty(self) -> bool:
        return not self.risk_levels and self.age_range is None and not self.conditions

    @property
    def active_count(self) -> int:
        """badge count on the filter button"""
        return len(self.risk_levels) + (1 if self.age_range else 0) + len(self.conditions)

    def toggle_risk_level(self, level: RiskLevel) -> "PatientFilters":
        return replace(self, risk_levels=self.risk_levels ^ {level})

    def toggle_condition(self, condition: str) -> "PatientFilters":
        if condition in self.conditions:
            return replace(self, conditions=tuple(c for c in self.conditions if c != condition))
        return replace(self, conditions=self.conditions + (condition,))

    def with_age_range(self, label: Optional[str]) -> "PatientFilters":
        return replace(self, age_range=parse_age_range(label))

    def cleared(self) -> "PatientFilters":
        return PatientFilters()


def _matches_query(patient: Patient, query: str) -> bool:
    if not query:
        return True
    q = query.lower()
    return (
        q in patient.name.lower()
        or q in patient.id.lower()
        or any(q in c.lower() for c in patient.conditions)
    )


def _matches_age(patient: Patient, age_range: Optional[Tuple[int, int]]) -> bool:
    # min > max never matches
    if age_range is None:
        return True
    low, high = age_range
    return low <= patient.age <= high


def _matches_conditions(patient: Patient, conditions: Tuple[str, ...]) -> bool:
    if not conditions:
        return True
    return any(
        selected.lower() in own.lower()
        for selected in conditions
        for own in patient.conditions
    )


def matches(patient: Patient, query: str, filters: PatientFilters, tab: PatientTab = PatientTab.ALL) -> bool:
    if not _matches_query(patient, query):
        return False
    if filters.risk_levels and patient.risk_level not in filters.risk_levels:
        return False
    if not _matches_age(patient, filters.age_range):
        return False
    if not _matches_conditions(patient, filters.conditions):
        return False
    if tab == PatientTab.HIGH_RISK and patient.risk_level != RiskLevel.HIGH:
        return False
    return True


def filter_patients(patients: List[Patient], query: str = "", filters: Optional[PatientFilters] = None,
                    tab: PatientTab = PatientTab.ALL) -> List[Patient]:
    """stable filter over the roster, never raises on well-typed input"""
    filters = filters or PatientFilters()
    query = query or ""
    return [p for p in patients if matches(p, query, filters, tab)]


class PatientListView:
    """
    memoized roster view
    recomputes only when the patients, query, filters or tab change structurally
    """
    def __init__(self):
        self._key = None
        self._result: List[Patient] = []
        self.recomputations = 0

    def visible(self, patients: List[Patient], query: str = "", filters: Optional[PatientFilters] = None,
                tab: PatientTab = PatientTab.ALL) -> List[Patient]:
        key = (tuple(patients), query or "", filters or PatientFilters(), tab)
        if key != self._key:
            self._result = filter_patients(patients, query, filters, tab)
            self._key = key
            self.recomputations += 1
            logger.debug("roster view recomputed: %d of %d patients visible", len(self._result), len(patients))
        return list(self._result)
