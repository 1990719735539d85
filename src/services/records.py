"""
Employee record decoding.

Each archive entry is expected to hold a UTF-8 JSON array of employee objects.
"""

import json
import logging
from typing import List

from domain.models import RawEmployee

logger = logging.getLogger(__name__)


class RecordDecodeError(Exception):
    """Raised when an entry is not a JSON array of employee objects."""
    pass


def decode_employees(payload: bytes, entry_name: str) -> List[RawEmployee]:
    """
    Parse one archive entry into employee records.

    A JSON null decodes to an empty list. Every call returns a new list.

    Args:
        payload: Decompressed entry bytes
        entry_name: Entry name (used in error messages)

    Returns:
        List of RawEmployee in source array order

    Raises:
        RecordDecodeError: If the payload is not UTF-8 JSON or does not match the employee shape

    Example:
        >>> decode_employees(b'[{"username": "jdoe", "roles": ["salaried"]}]', 'batch.json')
        [RawEmployee(dob='', name=EmployeeName(first='', last=''), roles=['salaried'], ...)]
    """
    try:
        data = json.loads(payload.decode('utf-8'))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise RecordDecodeError(f"Ignored invalid employees JSON: {entry_name}: {e}") from e

    if data is None:
        return []

    if not isinstance(data, list):
        raise RecordDecodeError(
            f"Ignored invalid employees JSON: {entry_name}: "
            f"expected an array, got {type(data).__name__}"
        )

    try:
        employees = [RawEmployee.from_dict(item) for item in data]
    except ValueError as e:
        raise RecordDecodeError(f"Ignored invalid employees JSON: {entry_name}: {e}") from e

    logger.info(f"Decoded {len(employees)} employee(s) from {entry_name}")
    return employees
