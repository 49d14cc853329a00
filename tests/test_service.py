from datetime import datetime

import pytest

from auth import (
    AuthenticationError,
    MockAuthProvider,
    RealAuthProvider,
    UserRole,
    get_auth_provider,
)
from config import DashboardConfig
from filters import PatientFilters, PatientTab
from main import example_usage, initialize_dashboard, parse_args
from models import Alert, AlertType
from patients import RiskLevel
from service import DashboardService


def test_initialize_dashboard_with_seed():
    config = DashboardConfig(patient_count=30, alert_count=8, seed=99)
    first = initialize_dashboard(config)
    second = initialize_dashboard(config)
    assert len(first.patients) == 30
    assert first.patients == second.patients
    assert [a.id for a in first.alerts] == [a.id for a in second.alerts]
    assert first.risk_distribution.total == 30


def test_initialize_empty_dashboard():
    service = initialize_dashboard(DashboardConfig(patient_count=0, alert_count=5))
    assert service.patients == []
    assert service.alerts == []
    assert service.get_statistics()["unread_alerts"] == 0


def test_search_reuses_cached_result(service):
    filters = PatientFilters.create(risk_levels=[RiskLevel.HIGH])
    service.search_patients("", filters, PatientTab.ALL)
    service.search_patients("", PatientFilters.create(risk_levels=[RiskLevel.HIGH]), PatientTab.ALL)
    assert service.list_view.recomputations == 1


def test_service_mark_alert_read(make_patient):
    patient = make_patient(risk_level=RiskLevel.HIGH)
    stamp = datetime(2026, 3, 15, 9, 0)
    alerts = [
        Alert("A1001", patient.id, patient.name, AlertType.MEDICATION, AlertType.MEDICATION.message, stamp),
        Alert("A1002", patient.id, patient.name, AlertType.RISK_INCREASE, AlertType.RISK_INCREASE.message,
              stamp, is_read=True),
        Alert("A1003", patient.id, patient.name, AlertType.NEW_CONDITION, AlertType.NEW_CONDITION.message, stamp),
    ]
    service = DashboardService([patient], alerts)
    updated = service.mark_alert_read("A1001")
    assert updated.is_read
    assert service.get_alert("A1001").is_read
    assert service.mark_alert_read("A9999") is None
    assert service.get_statistics()["unread_alerts"] == 1
    assert service.mark_all_alerts_read() == 1
    assert service.get_statistics()["unread_alerts"] == 0
    assert service.mark_all_alerts_read() == 0


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("DASHBOARD_PATIENT_COUNT", "12")
    monkeypatch.setenv("DASHBOARD_SEED", "5")
    monkeypatch.setenv("DASHBOARD_DEBUG", "true")
    monkeypatch.setenv("DASHBOARD_AUTH_PROVIDER", "REAL")
    config = DashboardConfig.from_env(dotenv=False)
    assert config.patient_count == 12
    assert config.alert_count == 15
    assert config.seed == 5
    assert config.debug is True
    assert config.auth_provider == "real"


def test_config_rejects_bad_integer(monkeypatch):
    monkeypatch.setenv("DASHBOARD_ALERT_COUNT", "many")
    with pytest.raises(ValueError, match="DASHBOARD_ALERT_COUNT"):
        DashboardConfig.from_env(dotenv=False)


def test_parse_args():
    args = parse_args(["--patients", "10", "--seed", "3"])
    assert args.patients == 10
    assert args.seed == 3
    assert args.alerts is None


def test_mock_auth_provider():
    provider = MockAuthProvider()
    user = provider.login("dr.rajput@example.com", "password")
    assert user.name == "Dr. Rajput"
    with pytest.raises(AuthenticationError):
        provider.login("someone@example.com", "password")
    assert provider.verify_otp("000000", "5551234567")
    assert not provider.verify_otp("12345", "5551234567")
    new_user = provider.signup("Nurse Joy", "joy@example.com", "secret", UserRole.NURSE)
    assert new_user.role == UserRole.NURSE
    assert new_user.id != user.id


def test_real_auth_provider_is_not_wired():
    with pytest.raises(NotImplementedError):
        RealAuthProvider().login("a@example.com", "pw")


def test_get_auth_provider():
    assert isinstance(get_auth_provider("mock"), MockAuthProvider)
    assert isinstance(get_auth_provider("real"), RealAuthProvider)
    with pytest.raises(ValueError):
        get_auth_provider("ldap")


def test_example_usage_labels_alert_types(capsys):
    example_usage(DashboardConfig(patient_count=40, alert_count=5, seed=11))
    out = capsys.readouterr().out
    assert "Risk distribution" in out
    assert any(f"[{t.display_name}]" in out for t in AlertType)
