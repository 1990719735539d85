"""
Employee export pipeline - core business logic.

This module handles the end-to-end export of one employee archive:
1. Fetch the ZIP archive over HTTP
2. Open the archive and enumerate its entries
3. Decode each entry as a JSON array of employees
4. Keep salaried employees born in summer and reduce them
5. Write one CSV file per entry
6. Return result (success or failure) with all diagnostics

Fetch and archive errors abort the run. Entry and record errors are
reported and skipped. No exceptions propagate out of run() for these.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .models import (
    Diagnostic,
    EntryResult,
    ExportResult,
    SEVERITY_ENTRY,
    SEVERITY_FATAL,
)
from services import archive as archive_service
from services import csv_writer
from services import filters
from services import records
from integrations import employee_api

logger = logging.getLogger(__name__)


class EmployeeExportProcessor:
    """
    Runs the fetch -> extract -> filter -> transform -> write pipeline.

    Returns ExportResult for explicit success/failure handling. Every problem
    is logged, passed to the optional diagnostic sink, and collected on the
    result.
    """

    def __init__(
        self,
        url: str,
        output_dir: Union[str, Path] = ".",
        timeout: Optional[float] = None,
        on_diagnostic: Optional[Callable[[Diagnostic], None]] = None
    ):
        """
        Initialize export processor.

        Args:
            url: Archive URL
            output_dir: Directory receiving employees_<N>.csv files
            timeout: Optional HTTP timeout in seconds
            on_diagnostic: Optional callback receiving each Diagnostic as it happens
        """
        self.url = url
        self.output_dir = Path(output_dir)
        self.timeout = timeout
        self.on_diagnostic = on_diagnostic
        self._diagnostics: List[Diagnostic] = []

    def run(self) -> ExportResult:
        """
        Export the archive.

        Returns:
            ExportResult with success=False only for fetch or archive failures
        """
        self._diagnostics = []
        logger.info(f"Starting employee export: url={self.url}, output_dir={self.output_dir}")

        try:
            payload = employee_api.fetch_archive(self.url, timeout=self.timeout)
        except employee_api.FetchError as e:
            return self._fatal('fetch', str(e))

        try:
            archive = archive_service.open_archive(payload)
        except archive_service.InvalidArchiveError as e:
            return self._fatal('archive', f"Error creating zip reader: {e}")

        entries: List[EntryResult] = []
        with archive:
            for entry in archive_service.list_entries(archive):
                entries.append(self._process_entry(entry))

        written = sum(1 for e in entries if e.success)
        logger.info(f"Export complete: {written}/{len(entries)} entries written")

        return ExportResult(
            success=True,
            url=self.url,
            entries=entries,
            diagnostics=list(self._diagnostics)
        )

    def _process_entry(self, entry: archive_service.ArchiveEntry) -> EntryResult:
        """
        Decode, filter and write one archive entry.

        Args:
            entry: Archive entry

        Returns:
            EntryResult (output_path is None if the entry was skipped)
        """
        logger.info(f"Processing entry {entry.index}: {entry.name}")

        try:
            payload = entry.read()
        except archive_service.EntryReadError as e:
            return self._skip_entry(entry, 'archive', str(e))

        try:
            employees = records.decode_employees(payload, entry.name)
        except records.RecordDecodeError as e:
            return self._skip_entry(entry, 'decode', str(e))

        cleaned = filters.filter_employees(
            employees,
            on_diagnostic=self._report,
            entry_name=entry.name
        )
        logger.info(f"Entry {entry.name}: kept {len(cleaned)}/{len(employees)} employee(s)")

        try:
            path = csv_writer.write_employees_csv(cleaned, entry.index, self.output_dir)
        except csv_writer.CsvWriteError as e:
            return self._skip_entry(entry, 'write', str(e))

        return EntryResult(
            index=entry.index,
            name=entry.name,
            output_path=path,
            employees_written=len(cleaned)
        )

    def _skip_entry(
        self,
        entry: archive_service.ArchiveEntry,
        stage: str,
        message: str
    ) -> EntryResult:
        """Report a recoverable entry failure."""
        logger.error(message)
        self._report(Diagnostic(
            severity=SEVERITY_ENTRY,
            stage=stage,
            message=message,
            entry_name=entry.name
        ))
        return EntryResult(index=entry.index, name=entry.name, error_message=message)

    def _fatal(self, stage: str, message: str) -> ExportResult:
        """Report a failure that aborts the run."""
        logger.error(message)
        self._report(Diagnostic(severity=SEVERITY_FATAL, stage=stage, message=message))
        return ExportResult(
            success=False,
            url=self.url,
            diagnostics=list(self._diagnostics),
            error_message=message
        )

    def _report(self, diagnostic: Diagnostic) -> None:
        """Collect a diagnostic and forward it to the caller's sink."""
        self._diagnostics.append(diagnostic)
        if self.on_diagnostic is not None:
            self.on_diagnostic(diagnostic)
