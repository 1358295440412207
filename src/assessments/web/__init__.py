"""Web API for the assessments service."""
