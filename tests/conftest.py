"""
Pytest configuration and fixtures for all tests.
"""

import io
import json
import os
import sys
import zipfile
from unittest.mock import MagicMock

import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('EMPLOYEES_ARCHIVE_URL', 'http://employees.test/employees.zip')
os.environ.setdefault('LOG_LEVEL', 'INFO')


def build_zip(files):
    """Build an in-memory ZIP from (name, bytes-or-str) pairs, preserving order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in files:
            zf.writestr(name, content)
    return buffer.getvalue()


def employee_dict(first, last, dob, roles, department="HR", email="test@test.com", username="user"):
    """Employee object as it appears in the archive JSON."""
    return {
        "dob": dob,
        "name": {"first": first, "last": last},
        "roles": roles,
        "email": email,
        "department": department,
        "username": username,
    }


@pytest.fixture
def sample_employees():
    """The four-record batch: only the 2nd and 4th qualify."""
    return [
        employee_dict("John", "Doe", "2006-01-02T15:04:05Z", ["salaried", "Manager"], username="jdoe"),
        employee_dict("Jane", "Doe", "2006-08-02T15:04:05Z", ["salaried", "Manager"], username="jane1"),
        employee_dict("Jane", "Doe", "2006-08-02T15:04:05Z", ["Manager"], username="jane2"),
        employee_dict("Jane", "VeryLongLastName", "2006-08-02T15:04:05Z", ["salaried", "Manager"],
                      department="IT", username="jane3"),
    ]


@pytest.fixture
def sample_archive(sample_employees):
    """ZIP archive with one entry holding the sample batch."""
    return build_zip([("employees_19-02-2024.json", json.dumps(sample_employees))])


@pytest.fixture
def mock_response():
    """Factory for mocked requests.Response objects."""
    def _make(status_code=200, content=b'', reason='OK'):
        response = MagicMock()
        response.status_code = status_code
        response.content = content
        response.reason = reason
        return response
    return _make
