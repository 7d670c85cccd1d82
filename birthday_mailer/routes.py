import logging

from flask import Blueprint, current_app, jsonify, request

from birthday_mailer.birthday_task import STATUS_BUSY
from birthday_mailer.birthdays import calculate_age, todays_birthdays, upcoming_birthdays
from birthday_mailer.employees import EmployeeNotFound, ValidationError, create_employee, delete_employee
from birthday_mailer.models import Store, local_today, utc_now
from birthday_mailer.send_log import already_sent_today, recent_logs, sent_today_count

logger = logging.getLogger("routes")

api_bp = Blueprint("birthday_api", __name__)


# ---------------- Helpers ---------------- #

def get_runner():
    return current_app.extensions["birthday_runner"]


def get_store():
    return get_runner().store


def get_today():
    return local_today(current_app.config.get("CLOCK", utc_now))


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


# ---------------- Store ---------------- #

@api_bp.route("/api/data", methods=["GET"])
def get_data():
    return jsonify(get_store().load().serialize())


@api_bp.route("/api/save", methods=["POST"])
def save_data():
    data = request.get_json(silent=True)
    try:
        store = Store.from_dict(data, strict=True)
    except ValueError as e:
        return error_response(str(e), 400)

    persisted = get_store().replace(store)
    return jsonify({"success": True, "persisted": persisted})


# ---------------- Employees ---------------- #

@api_bp.route("/api/employees", methods=["GET"])
def list_employees():
    today = get_today()
    employees = []
    for emp in get_store().load().employees:
        data = emp.serialize()
        data["edad"] = calculate_age(emp.fecha_nacimiento, today)
        employees.append(data)
    return jsonify(employees)


@api_bp.route("/api/employees", methods=["POST"])
def add_employee():
    data = request.get_json(silent=True) or {}
    store = get_store().load()
    try:
        employee = create_employee(
            store,
            data.get("nombre"),
            data.get("email"),
            data.get("fecha_nacimiento"),
            today=get_today(),
        )
    except ValidationError as e:
        return error_response(str(e), 400)

    get_store().replace(store)
    logger.info("👥 Employee added: %s", employee.nombre)
    return jsonify({"success": True, "employee": employee.serialize()}), 201


@api_bp.route("/api/employees/<int:employee_id>", methods=["DELETE"])
def remove_employee(employee_id):
    store = get_store().load()
    try:
        employee = delete_employee(store, employee_id)
    except EmployeeNotFound as e:
        return error_response(str(e), 404)

    get_store().replace(store)
    logger.info("🗑️ Employee removed: %s", employee.nombre)
    return jsonify({"success": True})


# ---------------- Dashboard reads ---------------- #

@api_bp.route("/api/birthdays/today", methods=["GET"])
def birthdays_today():
    today = get_today()
    store = get_store().load()
    results = []
    for emp in todays_birthdays(store.employees, today):
        data = emp.serialize()
        data["sent"] = already_sent_today(store.logs, emp.id, today)
        results.append(data)
    return jsonify(results)


@api_bp.route("/api/birthdays/upcoming", methods=["GET"])
def birthdays_upcoming():
    days = request.args.get("days", type=int)
    if days is None:
        days = current_app.config["UPCOMING_WINDOW_DAYS"]
    if days < 0:
        return error_response("days must be >= 0", 400)

    store = get_store().load()
    return jsonify([u.serialize() for u in upcoming_birthdays(store.employees, get_today(), days)])


@api_bp.route("/api/stats", methods=["GET"])
def stats():
    today = get_today()
    store = get_store().load()
    return jsonify({
        "totalEmployees": len(store.employees),
        "birthdaysToday": len(todays_birthdays(store.employees, today)),
        "sentToday": sent_today_count(store.logs, today),
        "sending": get_runner().running,
    })


@api_bp.route("/api/logs", methods=["GET"])
def activity_logs():
    cap = current_app.config["LOG_DISPLAY_LIMIT"]
    limit = request.args.get("limit", default=cap, type=int)
    logs = recent_logs(get_store().load().logs, min(limit, cap))
    return jsonify([entry.serialize() for entry in reversed(logs)])


# ---------------- Sending ---------------- #

@api_bp.route("/api/send-email", methods=["POST"])
def send_email():
    data = request.get_json(silent=True) or {}
    employee_id = data.get("employeeId")
    if employee_id is None and isinstance(data.get("employee"), dict):
        employee_id = data["employee"].get("id")
    try:
        employee_id = int(employee_id)
    except (TypeError, ValueError):
        return error_response("employeeId is required", 400)

    try:
        result = get_runner().send_to_employee(employee_id)
    except EmployeeNotFound as e:
        return error_response(str(e), 404)

    if result.status == STATUS_BUSY:
        return error_response("Ya hay un envío en curso", 409)
    if result.failed:
        return jsonify({"success": False, "error": "Error enviando email", "result": result.serialize()}), 502
    return jsonify({"success": True, "result": result.serialize()})


@api_bp.route("/api/send-all", methods=["POST"])
def send_all():
    result = get_runner().run_birthday_pass("manual")
    if result.status == STATUS_BUSY:
        return error_response("Ya hay un envío en curso", 409)
    return jsonify({"success": True, "result": result.serialize()})


@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})
