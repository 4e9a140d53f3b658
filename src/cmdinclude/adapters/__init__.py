"""Integrations binding the include pipeline to host documentation engines."""
