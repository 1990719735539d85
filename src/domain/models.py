"""
Data models for the employee export domain.

These type-safe data structures define clear contracts between the
pipeline stages (fetch, archive, decode, filter, write).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class EmployeeName:
    """Employee name as delivered by the API."""
    first: str = ''
    last: str = ''


def _lookup(data: Dict[str, Any], key: str) -> Any:
    """Exact key first, then the first key matching case-insensitively."""
    if key in data:
        return data[key]
    for candidate, value in data.items():
        if candidate.lower() == key:
            return value
    return None


def _clean_text(value: str) -> str:
    # Unpaired surrogates (e.g. an escaped "\ud800") become U+FFFD
    return value.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'replace')


def _as_string(value: Any, key: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return _clean_text(value)


def _string_field(data: Dict[str, Any], key: str) -> str:
    return _as_string(_lookup(data, key), key)


@dataclass(frozen=True)
class RawEmployee:
    """
    Employee record decoded from one element of an archive entry's JSON array.

    Attributes:
        dob: Date of birth, expected as an RFC3339 timestamp
        name: First and last name (first may hold several space-separated parts)
        roles: Ordered role labels (e.g. ["salaried", "Manager"])
        email: Email address
        department: Department name
        username: Login name, only used in diagnostics
    """
    dob: str = ''
    name: EmployeeName = field(default_factory=EmployeeName)
    roles: List[str] = field(default_factory=list)
    email: str = ''
    department: str = ''
    username: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RawEmployee':
        """
        Build a RawEmployee from a decoded JSON object.

        Missing keys and nulls fall back to empty values, unknown keys are
        ignored, and keys match case-insensitively when there is no exact match.

        Args:
            data: One element of the decoded JSON array

        Returns:
            RawEmployee

        Raises:
            ValueError: If the element is not an object or a field has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Employee record must be an object, got {type(data).__name__}")

        name_data = _lookup(data, 'name')
        if name_data is None:
            name_data = {}
        if not isinstance(name_data, dict):
            raise ValueError(f"Field 'name' must be an object, got {type(name_data).__name__}")

        roles = _lookup(data, 'roles')
        if roles is None:
            roles = []
        if not isinstance(roles, list):
            raise ValueError("Field 'roles' must be a list of strings")
        roles = [_as_string(role, 'roles') for role in roles]

        return cls(
            dob=_string_field(data, 'dob'),
            name=EmployeeName(
                first=_string_field(name_data, 'first'),
                last=_string_field(name_data, 'last')
            ),
            roles=roles,
            email=_string_field(data, 'email'),
            department=_string_field(data, 'department'),
            username=_string_field(data, 'username')
        )


@dataclass(frozen=True)
class CleanEmployee:
    """Reduced employee record written to CSV."""
    full_name: str
    department: str
    email: str

    def to_csv_row(self) -> str:
        """Join fields with commas. Values are not quoted or escaped."""
        return f"{self.full_name},{self.department},{self.email}"


# Diagnostic severities
SEVERITY_FATAL = 'fatal'
SEVERITY_ENTRY = 'entry'
SEVERITY_RECORD = 'record'


@dataclass(frozen=True)
class Diagnostic:
    """
    A problem reported while exporting.

    Attributes:
        severity: 'fatal' (run aborted), 'entry' (entry skipped) or 'record' (record excluded)
        stage: Pipeline stage that reported it (fetch, archive, decode, filter, write)
        message: Human-readable description
        entry_name: Archive entry name, when the problem is tied to an entry
        username: Employee username, when the problem is tied to a record
    """
    severity: str
    stage: str
    message: str
    entry_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return self.severity == SEVERITY_FATAL

    def __str__(self) -> str:
        context = []
        if self.entry_name is not None:
            context.append(f"entry={self.entry_name}")
        if self.username is not None:
            context.append(f"username={self.username}")
        suffix = f" ({', '.join(context)})" if context else ''
        return f"[{self.severity}/{self.stage}] {self.message}{suffix}"


@dataclass
class EntryResult:
    """
    Outcome for one archive entry.

    Attributes:
        index: 0-based position of the entry in the archive
        name: Entry name
        output_path: CSV written for this entry (None if skipped)
        employees_written: Number of employees in the CSV
        error_message: Reason the entry was skipped
    """
    index: int
    name: str
    output_path: Optional[Path] = None
    employees_written: int = 0
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.output_path is not None


@dataclass
class ExportResult:
    """
    Result of one export run.

    This explicit result type keeps the fatal/recoverable distinction visible
    to callers instead of burying it in log output.

    Attributes:
        success: False only when a fatal error (fetch or archive) aborted the run
        url: Archive URL that was fetched
        entries: Per-entry outcomes in archive order
        diagnostics: Every problem reported during the run, in order
        error_message: Fatal error description (if the run aborted)
    """
    success: bool
    url: str
    entries: List[EntryResult] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def files_written(self) -> List[Path]:
        """Paths of CSV files written, in archive order."""
        return [e.output_path for e in self.entries if e.output_path is not None]

    @property
    def fatal_diagnostics(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_fatal]

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 on success, 1 when the run aborted."""
        return 0 if self.success else 1

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.success:
            return (
                f"ExportResult(success=True, files={len(self.files_written)}, "
                f"diagnostics={len(self.diagnostics)})"
            )
        else:
            return f"ExportResult(success=False, url={self.url}, error={self.error_message})"
