"""
Root pytest configuration: enables the restcheck plugin for the test suite.
"""

pytest_plugins = ["restcheck.testing"]
