"""Assessments API: tools, questions, scales and student assignments."""

__version__ = "0.1.0"
