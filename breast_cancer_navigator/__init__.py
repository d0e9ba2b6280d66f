"""
Breast Cancer Navigator

Deterministic clinical decision support that turns structured tumor and
biomarker inputs into a staged breast cancer treatment plan, with optional
side-effect reporting.
"""

__version__ = "1.0.0"
