"""alert generation and read-state updates"""
from dataclasses import replace
from datetime import datetime, timedelta
from typing import List, Optional
import logging
import random
from models import Alert, AlertType
from patients import Patient, RiskLevel

logger = logging.getLogger(__name__)

ALERT_WINDOW_HOURS = 48
# only the first few medium-risk patients (generation order) can be alert subjects
MEDIUM_RISK_ALERT_SLOTS = 5
PRE_READ_PROBABILITY = 0.3


def alert_candidates(patients: List[Patient]) -> List[Patient]:
    """all high-risk patients plus the first MEDIUM_RISK_ALERT_SLOTS medium-risk ones"""
    high = [p for p in patients if p.risk_level == RiskLevel.HIGH]
    medium = [p for p in patients if p.risk_level == RiskLevel.MEDIUM]
    return high + medium[:MEDIUM_RISK_ALERT_SLOTS]


def generate_alerts(patients: List[Patient], count: int, rng: Optional[random.Random] = None,
                    now: Optional[datetime] = None) -> List[Alert]:
    """
    build `count` alerts for patients sampled (with replacement) from the candidate pool
    returns newest first; an empty pool gives an empty list
    """
    rng = rng or random.Random()
    now = now or datetime.now()
    pool = alert_candidates(patients)
    if not pool or count <= 0:
        logger.debug("no alerts generated (pool=%d, count=%d)", len(pool), count)
        return []
    alert_types = list(AlertType)
    window_seconds = ALERT_WINDOW_HOURS * 3600
    alerts = []
    for i in range(1, count + 1):
        patient = rng.choice(pool)
        alert_type = rng.choice(alert_types)
        alerts.append(Alert(
            id=f"A{1000 + i}",
            patient_id=patient.id,
            patient_name=patient.name,
            type=alert_type,
            message=alert_type.message,
            timestamp=now - timedelta(seconds=rng.uniform(0, window_seconds)),
            is_read=rng.random() < PRE_READ_PROBABILITY
        ))
    # newest first
    alerts.sort(key=lambda a: a.timestamp, reverse=True)
    logger.info("generated %d alerts from a pool of %d patients", len(alerts), len(pool))
    return alerts


def mark_alert_read(alerts: List[Alert], alert_id: str) -> List[Alert]:
    """
    new list with the matching alert marked read
    unknown ids return the input list unchanged
    """
    if not any(a.id == alert_id for a in alerts):
        logger.debug("mark_alert_read: alert %s not found", alert_id)
        return alerts
    return [replace(a, is_read=True) if a.id == alert_id else a for a in alerts]


def mark_all_alerts_read(alerts: List[Alert]) -> List[Alert]:
    return [a if a.is_read else replace(a, is_read=True) for a in alerts]


def unread_count(alerts: List[Alert]) -> int:
    return sum(1 for a in alerts if not a.is_read)


def recent_alerts(alerts: List[Alert], limit: int = 3) -> List[Alert]:
    """newest `limit` alerts, for the dashboard summary card"""
    return sorted(alerts, key=lambda a: a.timestamp, reverse=True)[:limit]
