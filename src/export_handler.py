"""
Entry point for the employee archive export.

Thin orchestration layer that delegates to EmployeeExportProcessor.
Runs as a command (`employee-export [URL] [--output-dir DIR]`) or as a
Lambda handler. Configuration comes from arguments first, then environment.
"""

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from domain.export_processor import EmployeeExportProcessor
from domain.models import Diagnostic, ExportResult
from integrations.employee_api import DEFAULT_ARCHIVE_URL

logger = logging.getLogger()

# Configuration from environment
ARCHIVE_URL = os.environ.get('EMPLOYEES_ARCHIVE_URL', DEFAULT_ARCHIVE_URL)
OUTPUT_DIR = os.environ.get('EMPLOYEES_OUTPUT_DIR', '.')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


def _read_timeout() -> Optional[float]:
    """
    Read EMPLOYEES_API_TIMEOUT (seconds) from the environment.

    Returns:
        Timeout in seconds, or None to use the transport default
    """
    raw = os.environ.get('EMPLOYEES_API_TIMEOUT')
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid EMPLOYEES_API_TIMEOUT: {raw!r}")
        return None
    return timeout if timeout > 0 else None


API_TIMEOUT = _read_timeout()


LOG_LEVEL_CHOICES = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Set the root log level and add a console handler if none is installed.

    Unknown level names fall back to INFO.
    """
    original_level = level
    level = level.upper()
    invalid_level = level not in LOG_LEVEL_CHOICES
    if invalid_level:
        level = 'INFO'
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if invalid_level:
        logger.warning(f"Unknown log level {original_level!r}, using INFO")


def run_export(
    url: Optional[str] = None,
    output_dir: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
    on_diagnostic: Optional[Callable[[Diagnostic], None]] = None
) -> ExportResult:
    """
    Export one archive, falling back to environment configuration.

    Args:
        url: Archive URL (default: EMPLOYEES_ARCHIVE_URL or the built-in URL)
        output_dir: Output directory (default: EMPLOYEES_OUTPUT_DIR or ".")
        timeout: HTTP timeout in seconds (default: EMPLOYEES_API_TIMEOUT or none)
        on_diagnostic: Optional callback receiving each Diagnostic

    Returns:
        ExportResult
    """
    processor = EmployeeExportProcessor(
        url=url or ARCHIVE_URL,
        output_dir=output_dir if output_dir is not None else OUTPUT_DIR,
        timeout=timeout if timeout is not None else API_TIMEOUT,
        on_diagnostic=on_diagnostic
    )

    logger.info("=" * 70)
    logger.info("Employee Export - Started")
    logger.info("=" * 70)

    result = processor.run()

    logger.info("=" * 70)
    if result.success:
        logger.info(f"Export finished: {len(result.files_written)} file(s) written")
    else:
        logger.warning(f"Export aborted: {result.error_message}")
    logger.info(f"  Diagnostics: {len(result.diagnostics)}")
    logger.info("=" * 70)

    return result


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point.

    Returns:
        int: 0 on success, 1 when the fetch or archive step failed
    """
    parser = argparse.ArgumentParser(
        prog='employee-export',
        description='Export salaried summer-born employees from a remote ZIP archive to CSV.'
    )
    parser.add_argument('url', nargs='?', default=None, help='Archive URL')
    parser.add_argument('--output-dir', default=None, help='Directory for employees_<N>.csv files')
    parser.add_argument(
        '--log-level',
        default=LOG_LEVEL,
        type=str.upper,
        choices=LOG_LEVEL_CHOICES,
        help='Logging level (default: %(default)s)'
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    result = run_export(url=args.url, output_dir=args.output_dir)
    return result.exit_code


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Run the export from a Lambda event.

    Expected event format (all keys optional):
    {
        "url": "https://example.com/employees.zip",
        "outputDir": "/tmp"
    }

    Returns:
        Dict with statusCode (200, or 502 when the run aborted) and a JSON body
    """
    configure_logging()
    event = event or {}

    result = run_export(url=event.get('url'), output_dir=event.get('outputDir'))

    body = {
        'success': result.success,
        'url': result.url,
        'files': [str(p) for p in result.files_written],
        'diagnostics': [str(d) for d in result.diagnostics],
    }
    if not result.success:
        body['error'] = result.error_message

    return {
        'statusCode': 200 if result.success else 502,
        'body': json.dumps(body)
    }


if __name__ == '__main__':
    raise SystemExit(main())
