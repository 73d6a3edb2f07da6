"""
Rendering helpers for the CLI: ASCII tables and JSON output.
"""
