import re

from birthday_mailer.models import Employee, parse_birth_date
from birthday_mailer.send_log import add_log

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationError(ValueError):
    """Employee input rejected before any mutation."""


class EmployeeNotFound(LookupError):
    def __init__(self, employee_id):
        super().__init__(f"Empleado {employee_id} no encontrado")
        self.employee_id = employee_id


def find_employee(store, employee_id):
    for emp in store.employees:
        if emp.id == employee_id:
            return emp
    return None


def validate_employee(store, nombre, email, fecha_nacimiento, today):
    """Return cleaned (nombre, email, birth date) or raise ValidationError."""
    for value in (nombre, email):
        if value is not None and not isinstance(value, str):
            raise ValidationError("Nombre y email deben ser texto")

    nombre = (nombre or "").strip()
    email = (email or "").strip()
    fecha = fecha_nacimiento.strip() if isinstance(fecha_nacimiento, str) else fecha_nacimiento

    if not nombre or not email or not fecha:
        raise ValidationError("Por favor completa todos los campos")

    if not EMAIL_RE.match(email):
        raise ValidationError("Por favor ingresa un email válido")

    try:
        birth_date = parse_birth_date(fecha)
    except ValueError:
        raise ValidationError("La fecha de nacimiento no es válida")

    if birth_date > today:
        raise ValidationError("La fecha de nacimiento no puede ser futura")

    if any(e.email.lower() == email.lower() for e in store.employees):
        raise ValidationError("Este email ya está registrado")

    return nombre, email, birth_date


def create_employee(store, nombre, email, fecha_nacimiento, today):
    nombre, email, birth_date = validate_employee(store, nombre, email, fecha_nacimiento, today)

    employee = Employee(
        id=store.next_employee_id(),
        nombre=nombre,
        email=email,
        fecha_nacimiento=birth_date,
    )
    store.employees.append(employee)
    add_log(store.logs, f"👥 {nombre} agregado al sistema", employee_id=employee.id)
    return employee


def delete_employee(store, employee_id):
    employee = find_employee(store, employee_id)
    if employee is None:
        raise EmployeeNotFound(employee_id)

    store.employees = [e for e in store.employees if e.id != employee_id]
    add_log(store.logs, f"🗑️ {employee.nombre} eliminado", employee_id=employee.id)
    return employee
