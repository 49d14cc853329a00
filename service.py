"""dashboard service: owns the generated fixture for the lifetime of the app"""
from typing import Dict, List, Optional
import logging
import random
import threading
from datetime import datetime
from models import Alert
from patients import (
    Patient, RiskDistribution, compute_risk_distribution,
    risk_factors, recommendations, risk_timeline, HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD
)
from alerts import mark_alert_read, mark_all_alerts_read, unread_count, recent_alerts
from filters import PatientFilters, PatientTab, PatientListView
from auth import AuthProvider, MockAuthProvider

logger = logging.getLogger(__name__)

FOLLOW_UP_DAYS = 7
REASSESSMENT_DAYS = 30


class DashboardService:
    """
    read-only patient roster plus the alert list
    alerts are the only mutable state: each update swaps in a new list built by the pure helpers in alerts.py
    """
    def __init__(self, patients: List[Patient], alerts: List[Alert], auth_provider: Optional[AuthProvider] = None,
                 rng: Optional[random.Random] = None):
        self.patients: List[Patient] = list(patients)
        self.patients_by_id: Dict[str, Patient] = {p.id: p for p in self.patients}
        self.risk_distribution: RiskDistribution = compute_risk_distribution(self.patients)
        self.alerts: List[Alert] = list(alerts)
        self.auth_provider: AuthProvider = auth_provider or MockAuthProvider()
        self.rng = rng or random.Random()
        self.list_view = PatientListView()
        self.lock = threading.Lock()

    def get_patient(self, patient_id: str) -> Optional[Patient]:
        return self.patients_by_id.get(patient_id)

    def search_patients(self, query: str = "", filters: Optional[PatientFilters] = None,
                        tab: PatientTab = PatientTab.ALL) -> List[Patient]:
        with self.lock:
            return self.list_view.visible(self.patients, query, filters, tab)

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        return next((a for a in self.alerts if a.id == alert_id), None)

    def mark_alert_read(self, alert_id: str) -> Optional[Alert]:
        """mark one alert read, returns the updated alert or None if the id is unknown"""
        with self.lock:
            self.alerts = mark_alert_read(self.alerts, alert_id)
            return self.get_alert(alert_id)

    def mark_all_alerts_read(self) -> int:
        """returns how many alerts changed state"""
        with self.lock:
            changed = unread_count(self.alerts)
            self.alerts = mark_all_alerts_read(self.alerts)
        logger.info("marked %d alerts read", changed)
        return changed

    def get_patient_detail(self, patient_id: str) -> Optional[Dict]:
        """everything the patient risk profile view needs"""
        patient = self.get_patient(patient_id)
        if not patient:
            return None
        return {
            "patient": patient.to_dict(),
            "risk_factors": [f.to_dict() for f in risk_factors(patient)],
            "recommendations": recommendations(patient),
            "next_steps": {"follow_up_days": FOLLOW_UP_DAYS, "risk_reassessment_days": REASSESSMENT_DAYS},
            "alerts": [a.to_dict() for a in self.alerts if a.patient_id == patient_id]
        }

    def get_patient_timeline(self, patient_id: str, months: int = 6, now: Optional[datetime] = None) -> Optional[Dict]:
        patient = self.get_patient(patient_id)
        if not patient:
            return None
        points = risk_timeline(patient, months=months, rng=self.rng, now=now)
        return {
            "patient_id": patient.id,
            "thresholds": {"high": HIGH_RISK_THRESHOLD, "medium": MEDIUM_RISK_THRESHOLD},
            "timeline": [p.to_dict() for p in points]
        }

    def get_statistics(self) -> Dict:
        """dashboard header numbers"""
        alerts = self.alerts
        return {
            "total_patients": len(self.patients),
            "high_risk_patients": self.risk_distribution.high,
            "risk_distribution": self.risk_distribution.to_dict(),
            "unread_alerts": unread_count(alerts),
            "total_alerts": len(alerts),
            "recent_alerts": [a.to_dict() for a in recent_alerts(alerts)]
        }
