"""
Patient Registry Backend

This package provides the backend services for the patient registry,
including patient intake, address normalization and the REST API used
by the front desk application.
"""

__version__ = "1.0.0"
__author__ = "Patient Registry Team"
