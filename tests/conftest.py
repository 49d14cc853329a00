import random
from datetime import datetime, date

import pytest

from alerts import generate_alerts
from api import create_app
from patients import Patient, ContactInfo, Gender, RiskLevel, generate_patients
from service import DashboardService

NOW = datetime(2026, 3, 15, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def patients(rng):
    return generate_patients(200, rng=rng, now=NOW)


@pytest.fixture
def make_patient():
    """build a hand-written patient, defaults are a low-risk 40 year old"""
    def _make(index=1, age=40, risk_level=RiskLevel.LOW, risk_score=None, conditions=("Asthma",), name=None):
        if risk_score is None:
            risk_score = risk_level.score_band[0]
        return Patient(
            id=f"P{1000 + index}",
            name=name or f"Patient {index}",
            age=age,
            gender=Gender.FEMALE,
            risk_level=risk_level,
            risk_score=risk_score,
            conditions=tuple(conditions),
            last_checkup=date(2026, 1, 10),
            contact_info=ContactInfo(email=f"patient{index}@example.com", phone="(555) 555-5555"),
        )
    return _make


@pytest.fixture
def service(patients, rng):
    alerts = generate_alerts(patients, 15, rng=rng, now=NOW)
    return DashboardService(patients, alerts, rng=rng)


@pytest.fixture
def client(service):
    app = create_app(service)
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
