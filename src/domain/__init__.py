"""
Domain layer for the employee export business logic.

This layer contains:
- Data models (raw and cleaned employee records)
- Business logic (fetch -> extract -> filter -> write pipeline)
- Result types (explicit success/failure handling with diagnostics)
"""
