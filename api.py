"""REST API for the clinical risk dashboard"""
from typing import List, Optional
import logging
from flask import Flask, Blueprint, request, jsonify, current_app
from flask_cors import CORS
from patients import RiskLevel, CONDITIONS, MAX_TIMELINE_MONTHS
from filters import PatientFilters, PatientTab, AgeRangePreset
from alerts import unread_count
from auth import AuthenticationError, is_well_formed_otp
from config import DashboardConfig, configure_logging
from main import initialize_dashboard
from service import DashboardService

logger = logging.getLogger(__name__)

bp = Blueprint("dashboard", __name__)


def get_service() -> DashboardService:
    return current_app.extensions["dashboard_service"]


def _split_multi(name: str) -> List[str]:
    """?risk=high&risk=low and ?risk=high,low both work, blanks are dropped"""
    values = []
    for raw in request.args.getlist(name):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values


def parse_filters() -> PatientFilters:
    """build the filter struct from query params, ValueError on unknown values"""
    risk_levels = []
    for raw in _split_multi("risk"):
        try:
            risk_levels.append(RiskLevel(raw.lower()))
        except ValueError:
            raise ValueError(f"Invalid risk level: {raw}")
    age_label = request.args.get("age")
    age_range = None
    if age_label:
        try:
            age_range = AgeRangePreset(age_label).bounds
        except ValueError:
            raise ValueError(f"Invalid age range: {age_label}")
    return PatientFilters.create(
        risk_levels=risk_levels, age_range=age_range, conditions=_split_multi("condition")
    )


def parse_tab() -> PatientTab:
    raw = request.args.get("tab", PatientTab.ALL.value)
    try:
        return PatientTab(raw)
    except ValueError:
        raise ValueError(f"Invalid tab: {raw}")


@bp.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({"status": "healthy", "patients": len(get_service().patients)})


@bp.route('/api/dashboard', methods=['GET'])
def get_dashboard():
    """Header statistics and the latest alerts"""
    return jsonify(get_service().get_statistics())


@bp.route('/api/risk-distribution', methods=['GET'])
def get_risk_distribution():
    return jsonify(get_service().risk_distribution.to_dict())


@bp.route('/api/conditions', methods=['GET'])
def get_filter_options():
    """Options for the filter popover"""
    return jsonify({
        "conditions": CONDITIONS,
        "risk_levels": [level.value for level in RiskLevel],
        "age_ranges": [preset.value for preset in AgeRangePreset],
        "tabs": [tab.value for tab in PatientTab]
    })


@bp.route('/api/patients', methods=['GET'])
def get_patients():
    """Filtered patient roster"""
    service = get_service()
    try:
        filters = parse_filters()
        tab = parse_tab()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    query = request.args.get("q", "")
    patients = service.search_patients(query, filters, tab)
    return jsonify({
        "count": len(patients), "total": len(service.patients),
        "high_risk_total": service.risk_distribution.high,
        "active_filters": filters.active_count,
        "patients": [p.to_dict() for p in patients]
    })


@bp.route('/api/patient/<string:patient_id>', methods=['GET'])
def get_patient_detail(patient_id):
    """Risk profile for a single patient"""
    detail = get_service().get_patient_detail(patient_id)
    if detail is None:
        return jsonify({"error": "Patient not found"}), 404
    return jsonify(detail)


@bp.route('/api/patient/<string:patient_id>/timeline', methods=['GET'])
def get_patient_timeline(patient_id):
    """Monthly risk score trend"""
    try:
        months = int(request.args.get("months", 6))
    except ValueError:
        return jsonify({"error": "months must be an integer"}), 400
    if not 1 <= months <= MAX_TIMELINE_MONTHS:
        return jsonify({"error": f"months must be between 1 and {MAX_TIMELINE_MONTHS}"}), 400
    timeline = get_service().get_patient_timeline(patient_id, months=months)
    if timeline is None:
        return jsonify({"error": "Patient not found"}), 404
    return jsonify(timeline)


@bp.route('/api/alerts', methods=['GET'])
def get_alerts():
    """All alerts newest first, optionally only unread ones"""
    service = get_service()
    alerts = service.alerts
    unread = unread_count(alerts)
    if request.args.get("unread", "false").lower() == "true":
        alerts = [a for a in alerts if not a.is_read]
    return jsonify({"count": len(alerts), "unread": unread, "alerts": [a.to_dict() for a in alerts]})


@bp.route('/api/alerts/<string:alert_id>/read', methods=['POST'])
def mark_alert_read(alert_id):
    alert = get_service().mark_alert_read(alert_id)
    if alert is None:
        return jsonify({"error": "Alert not found"}), 404
    return jsonify({"status": "read", "alert": alert.to_dict()})


@bp.route('/api/alerts/read-all', methods=['POST'])
def mark_all_alerts_read():
    changed = get_service().mark_all_alerts_read()
    return jsonify({"status": "read", "updated": changed})


@bp.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON data or Content-Type not application/json"}), 400
    for field in ("email", "password"):
        if field not in data:
            return jsonify({"error": f"Missing required field: {field}"}), 400
    try:
        user = get_service().auth_provider.login(data["email"], data["password"])
    except AuthenticationError as e:
        return jsonify({"error": str(e)}), 401
    except NotImplementedError as e:
        return jsonify({"error": str(e)}), 501
    return jsonify({"status": "authenticated", "user": user.to_dict()})


@bp.route('/api/auth/verify-otp', methods=['POST'])
def verify_otp():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    code = str(data.get("code", ""))
    if not is_well_formed_otp(code):
        return jsonify({"error": "OTP must be a 6-digit code"}), 400
    try:
        verified = get_service().auth_provider.verify_otp(code, data.get("phone", ""))
    except NotImplementedError as e:
        return jsonify({"error": str(e)}), 501
    if not verified:
        return jsonify({"error": "OTP verification failed"}), 401
    return jsonify({"status": "verified"})


def create_app(service: Optional[DashboardService] = None, config: Optional[DashboardConfig] = None) -> Flask:
    """
    build the Flask app around an already-initialized dashboard service
    a fresh fixture is generated from `config` when no service is given
    """
    app = Flask(__name__)
    CORS(app)
    if service is None:
        service = initialize_dashboard(config)
    app.extensions["dashboard_service"] = service
    app.register_blueprint(bp)
    return app


if __name__ == '__main__':
    config = DashboardConfig.from_env()
    configure_logging(config.log_level)
    app = create_app(config=config)
    logger.info("Starting clinical risk dashboard API on http://%s:%d/", config.host, config.port)
    logger.info("  GET  /api/dashboard               - header statistics")
    logger.info("  GET  /api/patients                - filtered roster (q, risk, age, condition, tab)")
    logger.info("  GET  /api/patient/<id>            - patient risk profile")
    logger.info("  GET  /api/patient/<id>/timeline   - risk score trend")
    logger.info("  GET  /api/alerts                  - alerts, newest first")
    logger.info("  POST /api/alerts/<id>/read        - mark alert read")
    logger.info("  POST /api/alerts/read-all         - mark all alerts read")
    app.run(debug=config.debug, port=config.port, host=config.host)
