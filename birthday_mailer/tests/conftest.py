import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure project package imports work when running tests from birthday_mailer/
# add repository root (parent of birthday_mailer/) so `import birthday_mailer.xxx` works
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from birthday_mailer.models import Employee, Store  # noqa: E402
from birthday_mailer.store import JsonStore  # noqa: E402


@pytest.fixture
def ana():
    return Employee(id=1, nombre="Ana Lopez", email="ana@example.com", fecha_nacimiento=date(1990, 6, 15))


@pytest.fixture
def luis():
    return Employee(id=2, nombre="Luis Perez", email="luis@example.com", fecha_nacimiento=date(1985, 6, 15))


@pytest.fixture
def json_store(tmp_path):
    return JsonStore(tmp_path / "data.json")


@pytest.fixture
def seeded_store(json_store, ana, luis):
    json_store.replace(Store(employees=[ana, luis]))
    return json_store
