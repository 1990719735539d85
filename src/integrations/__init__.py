"""
External integrations (HTTP employee archive API).
"""

__all__ = ['employee_api']
