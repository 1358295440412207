"""Core assessment logic: row aggregation and query orchestration."""
