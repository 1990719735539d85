"""
Tests for the export entry points (CLI and Lambda handler).
"""

import json
import logging

import pytest
from unittest.mock import Mock, patch
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

import export_handler


@pytest.fixture
def mock_context():
    """Mock Lambda context."""
    context = Mock()
    context.request_id = "test-request-id"
    context.function_name = "employee-export-test"
    return context


class TestRunExport:
    """Test configuration resolution."""

    @patch('integrations.employee_api.requests.get')
    def test_uses_configured_url(self, mock_get, mock_response, sample_archive, tmp_path):
        """Test the environment URL is used when none is passed."""
        mock_get.return_value = mock_response(200, sample_archive)

        result = export_handler.run_export(output_dir=tmp_path)

        assert result.success is True
        assert result.url == export_handler.ARCHIVE_URL
        mock_get.assert_called_once_with(export_handler.ARCHIVE_URL, timeout=None)

    @patch('integrations.employee_api.requests.get')
    def test_explicit_arguments_win(self, mock_get, mock_response, sample_archive, tmp_path):
        mock_get.return_value = mock_response(200, sample_archive)

        result = export_handler.run_export(url='http://other.test/x.zip', output_dir=tmp_path, timeout=3)

        assert result.url == 'http://other.test/x.zip'
        mock_get.assert_called_once_with('http://other.test/x.zip', timeout=3)

    @patch('integrations.employee_api.requests.get')
    def test_environment_timeout(self, mock_get, mock_response, sample_archive, tmp_path):
        mock_get.return_value = mock_response(200, sample_archive)

        with patch.object(export_handler, 'API_TIMEOUT', 30.0):
            export_handler.run_export(output_dir=tmp_path)

        mock_get.assert_called_once_with(export_handler.ARCHIVE_URL, timeout=30.0)

    @patch('integrations.employee_api.requests.get')
    def test_diagnostic_sink(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response(404, b'', reason='Not Found')
        received = []

        export_handler.run_export(output_dir=tmp_path, on_diagnostic=received.append)

        assert len(received) == 1
        assert received[0].stage == 'fetch'


class TestReadTimeout:
    """Test EMPLOYEES_API_TIMEOUT parsing."""

    def test_unset(self):
        with patch.dict(os.environ, {'EMPLOYEES_API_TIMEOUT': ''}):
            assert export_handler._read_timeout() is None

    def test_valid(self):
        with patch.dict(os.environ, {'EMPLOYEES_API_TIMEOUT': '12.5'}):
            assert export_handler._read_timeout() == 12.5

    @pytest.mark.parametrize("raw", ['abc', '0', '-4'])
    def test_invalid_ignored(self, raw):
        with patch.dict(os.environ, {'EMPLOYEES_API_TIMEOUT': raw}):
            assert export_handler._read_timeout() is None


class TestMain:
    """Test the command-line entry point."""

    @patch('integrations.employee_api.requests.get')
    def test_main_success(self, mock_get, mock_response, sample_archive, tmp_path):
        mock_get.return_value = mock_response(200, sample_archive)

        exit_code = export_handler.main(['http://cli.test/a.zip', '--output-dir', str(tmp_path)])

        assert exit_code == 0
        assert (tmp_path / "employees_0.csv").exists()
        mock_get.assert_called_once_with('http://cli.test/a.zip', timeout=None)

    @patch('integrations.employee_api.requests.get')
    def test_main_fatal_error_exit_code(self, mock_get, mock_response, tmp_path, caplog):
        """Test a failed fetch exits non-zero."""
        mock_get.return_value = mock_response(404, b'', reason='Not Found')

        with caplog.at_level(logging.INFO):
            exit_code = export_handler.main(['--output-dir', str(tmp_path)])

        assert exit_code == 1
        assert "Error calling API" in caplog.text
        assert list(tmp_path.iterdir()) == []

    @patch('integrations.employee_api.requests.get')
    def test_main_invalid_archive_exit_code(self, mock_get, mock_response, tmp_path):
        mock_get.return_value = mock_response(200, b'not a zip')

        assert export_handler.main(['--output-dir', str(tmp_path)]) == 1


class TestLogLevel:
    """Test log level handling."""

    def test_main_rejects_unknown_log_level(self, capsys):
        """Test argparse reports an unknown --log-level instead of crashing."""
        with pytest.raises(SystemExit) as exc_info:
            export_handler.main(['--log-level', 'LOUD'])

        assert exc_info.value.code == 2
        assert "invalid choice: 'LOUD'" in capsys.readouterr().err

    @patch('integrations.employee_api.requests.get')
    def test_main_accepts_lowercase_level(self, mock_get, mock_response, sample_archive, tmp_path):
        mock_get.return_value = mock_response(200, sample_archive)

        assert export_handler.main(['--log-level', 'debug', '--output-dir', str(tmp_path)]) == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_unknown_level_falls_back(self, caplog):
        """Test an invalid LOG_LEVEL value falls back to INFO with a warning."""
        with caplog.at_level(logging.WARNING):
            export_handler.configure_logging('verbose')
            assert logging.getLogger().level == logging.INFO

        assert "Unknown log level 'verbose', using INFO" in caplog.text


class TestLambdaHandler:
    """Test the Lambda handler."""

    @patch('integrations.employee_api.requests.get')
    def test_lambda_handler_success(self, mock_get, mock_response, sample_archive, tmp_path, mock_context):
        mock_get.return_value = mock_response(200, sample_archive)

        response = export_handler.lambda_handler(
            {'url': 'http://lambda.test/a.zip', 'outputDir': str(tmp_path)},
            mock_context
        )

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['success'] is True
        assert body['url'] == 'http://lambda.test/a.zip'
        assert body['files'] == [str(tmp_path / "employees_0.csv")]
        assert body['diagnostics'] == []
        assert 'error' not in body

    @patch('integrations.employee_api.requests.get')
    def test_lambda_handler_fetch_failure(self, mock_get, mock_response, tmp_path, mock_context):
        mock_get.return_value = mock_response(503, b'', reason='Service Unavailable')

        response = export_handler.lambda_handler({'outputDir': str(tmp_path)}, mock_context)

        assert response['statusCode'] == 502
        body = json.loads(response['body'])
        assert body['success'] is False
        assert body['files'] == []
        assert "Error calling API: 503 Service Unavailable" in body['error']
        assert len(body['diagnostics']) == 1

    @patch('integrations.employee_api.requests.get')
    def test_lambda_handler_empty_event(self, mock_get, mock_response, sample_archive, tmp_path,
                                        mock_context, monkeypatch):
        """Test an empty event falls back to configuration."""
        monkeypatch.chdir(tmp_path)
        mock_get.return_value = mock_response(200, sample_archive)

        with patch.object(export_handler, 'OUTPUT_DIR', '.'):
            response = export_handler.lambda_handler(None, mock_context)

        assert response['statusCode'] == 200
        assert (tmp_path / "employees_0.csv").exists()
        mock_get.assert_called_once_with(export_handler.ARCHIVE_URL, timeout=None)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
