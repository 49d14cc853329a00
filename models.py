"""value types shared across the dashboard: alerts, risk factors, timeline points"""
from dataclasses import dataclass
from datetime import datetime, date
from enum import Enum


class AlertType(Enum):
    """kinds of patient notifications, each with a fixed message"""
    RISK_INCREASE = "risk-increase"
    MISSED_APPOINTMENT = "missed-appointment"
    NEW_CONDITION = "new-condition"
    MEDICATION = "medication"
    @property
    def message(self) -> str:
        """canned message shown for this alert type"""
        return {
            AlertType.RISK_INCREASE: "Risk score increased significantly",
            AlertType.MISSED_APPOINTMENT: "Missed scheduled follow-up appointment",
            AlertType.NEW_CONDITION: "New condition detected in recent test results",
            AlertType.MEDICATION: "Prescription refill needed within 7 days"
        }[self]
    @property
    def display_name(self) -> str:
        return self.value.replace("-", " ").capitalize()


@dataclass(frozen=True)
class Alert:
    """
    notification tied to a patient
    patient_name is a snapshot taken at generation time and is not re-synced with the roster
    is_read only ever goes False -> True, via the mark-as-read helpers in alerts.py
    """
    id: str
    patient_id: str
    patient_name: str
    type: AlertType
    message: str
    timestamp: datetime
    is_read: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id, "patient_id": self.patient_id, "patient_name": self.patient_name,
            "type": self.type.value, "message": self.message,
            "timestamp": self.timestamp.isoformat(), "is_read": self.is_read
        }


@dataclass(frozen=True)
class RiskFactor:
    """one contributing factor on the patient detail view"""
    factor: str
    impact: str  # high, medium, low

    def to_dict(self) -> dict:
        return {"factor": self.factor, "impact": self.impact}


@dataclass(frozen=True)
class TimelinePoint:
    """monthly risk score sample"""
    month: str  # short month name, e.g. "Mar"
    score: int
    full_date: date

    def to_dict(self) -> dict:
        return {"month": self.month, "score": self.score, "full_date": self.full_date.isoformat()}
