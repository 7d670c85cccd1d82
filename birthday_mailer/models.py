import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

logger = logging.getLogger("models")

LOG_SUCCESS = "success"
LOG_ERROR = "error"
LOG_INFO = "info"
LOG_TYPES = (LOG_SUCCESS, LOG_ERROR, LOG_INFO)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(clock=utc_now) -> date:
    """Local calendar date of ``clock()``."""
    return clock().astimezone().date()


def parse_birth_date(value) -> date:
    """Accept a date, or an ISO string such as '1990-06-15' (time part ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp. Naive values are treated as local time."""
    ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts


@dataclass
class Employee:
    id: int
    nombre: str
    email: str
    fecha_nacimiento: date

    @property
    def first_name(self):
        return self.nombre.split(" ")[0] if self.nombre else ""

    def serialize(self):
        return {
            "id": self.id,
            "nombre": self.nombre,
            "email": self.email,
            "fecha_nacimiento": self.fecha_nacimiento.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            nombre=str(data["nombre"]),
            email=str(data["email"]),
            fecha_nacimiento=parse_birth_date(data["fecha_nacimiento"]),
        )


@dataclass
class LogEntry:
    timestamp: str
    message: str
    type: str = LOG_INFO
    employee_id: Optional[int] = None

    @classmethod
    def create(cls, message, type=LOG_INFO, employee_id=None, now=None):
        now = now or utc_now()
        if now.tzinfo is None:
            now = now.astimezone()
        return cls(timestamp=now.isoformat(), message=message, type=type, employee_id=employee_id)

    @property
    def occurred_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def serialize(self):
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "type": self.type,
            "employeeId": self.employee_id,
        }

    @classmethod
    def from_dict(cls, data):
        log_type = data.get("type", LOG_INFO)
        if log_type not in LOG_TYPES:
            raise ValueError(f"Unknown log type: {log_type}")
        employee_id = data.get("employeeId")
        # Validate now so a bad row is dropped at load time, not during dedup
        parse_timestamp(data["timestamp"])
        return cls(
            timestamp=data["timestamp"],
            message=str(data.get("message", "")),
            type=log_type,
            employee_id=int(employee_id) if employee_id is not None else None,
        )


@dataclass
class Store:
    employees: List[Employee] = field(default_factory=list)
    logs: List[LogEntry] = field(default_factory=list)

    def next_employee_id(self) -> int:
        """Ids are never reused: logs still reference deleted employees."""
        used = [e.id for e in self.employees]
        used += [entry.employee_id for entry in self.logs if entry.employee_id is not None]
        return max(used + [0]) + 1

    def serialize(self):
        return {
            "employees": [e.serialize() for e in self.employees],
            "logs": [entry.serialize() for entry in self.logs],
        }

    @classmethod
    def from_dict(cls, data, strict=False):
        """
        Build a store from the JSON document.
        Malformed rows are skipped and logged unless ``strict`` is set,
        in which case the first bad row raises ValueError.
        """
        if not isinstance(data, dict):
            raise ValueError("Store document must be a JSON object")

        employees = data.get("employees") or []
        logs = data.get("logs") or []
        if not isinstance(employees, list) or not isinstance(logs, list):
            raise ValueError("\"employees\" and \"logs\" must be JSON arrays")

        store = cls()
        for raw in employees:
            try:
                store.employees.append(Employee.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                if strict:
                    raise ValueError(f"Invalid employee {raw!r}: {e}") from e
                logger.warning("⚠️ Skipping malformed employee %r: %s", raw, e)

        for raw in logs:
            try:
                store.logs.append(LogEntry.from_dict(raw))
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                if strict:
                    raise ValueError(f"Invalid log entry {raw!r}: {e}") from e
                logger.warning("⚠️ Skipping malformed log entry %r: %s", raw, e)

        ids = [e.id for e in store.employees]
        if strict and len(ids) != len(set(ids)):
            raise ValueError("Employee ids must be unique")
        return store
