"""Report Workflow package.

This package is organized by feature modules (reports, workflow, notifications,
attendance, ...) with a thin Flask controller layer and service/repository layers.
"""
