"""
Contract test fixtures.

Contract tests reuse the ``app`` and ``client`` fixtures from tests/conftest.py.
No additional fixtures needed here, but this file exists for future needs.
"""
