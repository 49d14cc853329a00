"""
Main entry point and initialization for the clinical risk dashboard
"""
from typing import Optional
import argparse
import logging
import random
from config import DashboardConfig, configure_logging
from patients import generate_patients, RiskLevel
from alerts import generate_alerts
from filters import PatientFilters, PatientTab, parse_age_range
from auth import get_auth_provider
from service import DashboardService

logger = logging.getLogger(__name__)


def initialize_dashboard(config: Optional[DashboardConfig] = None) -> DashboardService:
    """
    generate the patient/alert fixture once and wrap it in a service
    the caller owns the returned service for the rest of the session
    """
    config = config or DashboardConfig()
    rng = random.Random(config.seed) if config.seed is not None else random.Random()
    patients = generate_patients(config.patient_count, rng=rng)
    alerts = generate_alerts(patients, config.alert_count, rng=rng)
    service = DashboardService(
        patients, alerts, auth_provider=get_auth_provider(config.auth_provider), rng=rng
    )
    logger.info(
        "dashboard initialized: %d patients, %d alerts (seed=%s)",
        len(service.patients), len(service.alerts), config.seed
    )
    return service


def example_usage(config: Optional[DashboardConfig] = None):
    """print a short tour of the generated fixture"""
    service = initialize_dashboard(config)
    stats = service.get_statistics()
    print("clinical risk dashboard \n")
    print("Risk distribution")
    dist = service.risk_distribution
    for level in RiskLevel:
        count = getattr(dist, level.value)
        print(f"  {level.display_name}: {count} ({dist.percentage(level)}%)")
    print(f"  total: {dist.total}")
    print()
    print(f"Alerts: {stats['total_alerts']} total, {stats['unread_alerts']} unread")
    for alert in service.alerts[:3]:
        marker = " " if alert.is_read else "*"
        print(f" {marker} {alert.timestamp:%Y-%m-%d %H:%M} {alert.patient_name} ({alert.patient_id}) [{alert.type.display_name}]: {alert.message}")
    print()
    print("ex 1: high-risk tab")
    high_risk = service.search_patients(tab=PatientTab.HIGH_RISK)
    print(f"  {len(high_risk)} patients")
    print()
    print("ex 2: search 'diabetes', age 51-70")
    filters = PatientFilters(age_range=parse_age_range("51-70"))
    found = service.search_patients("diabetes", filters)
    for patient in found[:5]:
        print(f"  {patient.id} {patient.name}, {patient.age}y, {patient.risk_level.value} ({patient.risk_score})")
    print(f"  {len(found)} match(es)")
    print()
    if service.patients:
        patient = service.patients[0]
        detail = service.get_patient_detail(patient.id)
        print(f"ex 3: profile for {patient.name}")
        for factor in detail["risk_factors"]:
            print(f"  factor: {factor['factor']} ({factor['impact']} impact)")
        for rec in detail["recommendations"]:
            print(f"  recommend: {rec}")
        print()
    changed = service.mark_all_alerts_read()
    print(f"marked {changed} alerts read, unread now {service.get_statistics()['unread_alerts']}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clinical risk dashboard fixture demo")
    parser.add_argument("--patients", type=int, default=None, help="number of patients to generate")
    parser.add_argument("--alerts", type=int, default=None, help="number of alerts to generate")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible fixture")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = DashboardConfig.from_env()
    if args.patients is not None:
        config.patient_count = args.patients
    if args.alerts is not None:
        config.alert_count = args.alerts
    if args.seed is not None:
        config.seed = args.seed
    configure_logging(config.log_level)
    example_usage(config)


if __name__ == "__main__":
    main()
