"""
auth_platform_tests package

Tests for the shared auth core, the auth service and the chat service.
`conftest.py` points both services at throwaway SQLite files and sets the
signing secret before any service module is imported.
"""
