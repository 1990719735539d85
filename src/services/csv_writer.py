"""
CSV output for cleaned employee records.

Values are written as-is: fields containing commas or newlines are not
quoted and will corrupt the row.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from domain.models import CleanEmployee

logger = logging.getLogger(__name__)

CSV_HEADER = "full_name,department,email"


class CsvWriteError(Exception):
    """Raised when a CSV file cannot be written."""
    pass


def output_filename(index: int) -> str:
    """File name for the archive entry at the given position."""
    return f"employees_{index}.csv"


def render_csv(employees: Iterable[CleanEmployee]) -> str:
    """
    Serialize employees as CSV text.

    Args:
        employees: Cleaned records in output order

    Returns:
        str: Header line plus one line per employee, each ending in a newline

    Example:
        >>> render_csv([CleanEmployee("Jane Doe", "HR", "jane@example.com")])
        'full_name,department,email\\nJane Doe,HR,jane@example.com\\n'
    """
    lines = [CSV_HEADER]
    lines.extend(employee.to_csv_row() for employee in employees)
    return "\n".join(lines) + "\n"


def write_employees_csv(
    employees: Iterable[CleanEmployee],
    index: int,
    output_dir: Union[str, Path] = "."
) -> Path:
    """
    Write employees to employees_<index>.csv, overwriting any existing file.

    Args:
        employees: Cleaned records in output order
        index: 0-based archive entry position
        output_dir: Directory for the file (default: current directory)

    Returns:
        Path: The written file

    Raises:
        CsvWriteError: If the file cannot be written
    """
    path = Path(output_dir) / output_filename(index)
    content = render_csv(employees)

    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
    except OSError as e:
        raise CsvWriteError(f"Error writing to file: {path}: {e}") from e

    logger.info(f"Wrote {path} ({len(content)} characters)")
    return path
