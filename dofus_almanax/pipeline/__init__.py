"""
Aggregation pipeline.

Submodules:
  aggregator  fetch → validate → enrich → merge, plus the sync entry point
  store       last successful result kept for display on fatal errors
"""
