"""
Reporting — ASCII formatters for CLI output.
"""
