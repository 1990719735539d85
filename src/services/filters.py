"""
Employee filtering and reshaping.

Keeps employees that are salaried and born in a summer month, and reduces
each kept record to the fields written to CSV.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from domain.models import CleanEmployee, Diagnostic, RawEmployee, SEVERITY_RECORD

logger = logging.getLogger(__name__)

SALARIED_ROLE = 'salaried'

# June, July, August, September
SUMMER_MONTHS = frozenset({6, 7, 8, 9})

# Above this combined length the first name is reduced to an initial
FULL_NAME_MAX_LENGTH = 9

_RFC3339_RE = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+-]\d{2}:\d{2})$',
    re.ASCII
)


def is_salaried(employee: RawEmployee) -> bool:
    """Check for the exact, case-sensitive 'salaried' role."""
    return SALARIED_ROLE in employee.roles


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp.

    Args:
        value: Timestamp such as "2006-01-02T15:04:05Z" or "2006-01-02T15:04:05.5+02:00"

    Returns:
        datetime: Timezone-aware datetime in the timestamp's own offset

    Raises:
        ValueError: If the value is not a valid RFC3339 timestamp
    """
    if not _RFC3339_RE.match(value):
        raise ValueError(f"cannot parse {value!r} as RFC3339 timestamp")

    normalized = value[:-1] + '+00:00' if value.endswith('Z') else value
    fraction = re.search(r'\.(\d+)', normalized)
    if fraction:
        # datetime only holds microseconds
        normalized = normalized.replace(fraction.group(0), '.' + fraction.group(1)[:6].ljust(6, '0'))

    try:
        return datetime.strptime(normalized, '%Y-%m-%dT%H:%M:%S.%f%z' if fraction else '%Y-%m-%dT%H:%M:%S%z')
    except ValueError as e:
        raise ValueError(f"cannot parse {value!r} as RFC3339 timestamp: {e}") from e


def born_in_summer(employee: RawEmployee) -> bool:
    """
    Check whether the employee's date of birth falls in June to September.

    Raises:
        ValueError: If the date of birth is not an RFC3339 timestamp
    """
    return parse_rfc3339(employee.dob).month in SUMMER_MONTHS


def _name_length(value: str) -> int:
    # Measured in UTF-8 bytes
    return len(value.encode('utf-8'))


def clean_up_employee(employee: RawEmployee) -> CleanEmployee:
    """
    Reduce an employee to full name, department and email.

    Long names are abbreviated: "Jane"/"VeryLongLastName" -> "J. VeryLongLastName".
    Otherwise the full first name is kept: "Mary Ann"/"Lee" -> "Mary Ann Lee".
    """
    first_segment = employee.name.first.split(' ')[0]
    last = employee.name.last

    if _name_length(first_segment) + _name_length(last) > FULL_NAME_MAX_LENGTH:
        full_name = f"{first_segment[:1]}. {last}"
    else:
        full_name = f"{employee.name.first} {last}"

    return CleanEmployee(
        full_name=full_name,
        department=employee.department,
        email=employee.email
    )


def filter_employees(
    employees: Iterable[RawEmployee],
    on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
    entry_name: Optional[str] = None
) -> List[CleanEmployee]:
    """
    Keep salaried employees born in summer, in input order.

    Both checks run for every employee, so a bad date of birth is reported
    even when the employee is not salaried.

    Args:
        employees: Decoded employee records
        on_diagnostic: Optional callback receiving one Diagnostic per bad date of birth
        entry_name: Archive entry the records came from (for diagnostics)

    Returns:
        List of CleanEmployee
    """
    filtered: List[CleanEmployee] = []

    for employee in employees:
        salaried = is_salaried(employee)
        try:
            summer = born_in_summer(employee)
        except ValueError as e:
            summer = False
            logger.warning(
                f"Error checking if employee was born in summer: {employee.username}, {e}"
            )
            if on_diagnostic is not None:
                on_diagnostic(Diagnostic(
                    severity=SEVERITY_RECORD,
                    stage='filter',
                    message=f"Error checking if employee was born in summer: {e}",
                    entry_name=entry_name,
                    username=employee.username
                ))

        if salaried and summer:
            filtered.append(clean_up_employee(employee))

    return filtered
