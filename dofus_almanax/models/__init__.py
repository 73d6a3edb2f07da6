"""
Pydantic models: provider payloads, canonical almanax entries, preferences.
"""
