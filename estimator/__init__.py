"""Contractor Job Cost Estimator.

This package contains the calculation engine that prices remodeling jobs:
work items are resolved to units, priced per unit, rolled up per category,
pushed through the project adjustment chain and reconciled against the
payment ledger.

Architecture:
- validators: boundary validation of raw project data
- services: unit resolution, pricing, aggregation, adjustments, payments
- models: pydantic input and result models
- config: environment settings, limits and error codes
"""

__version__ = "1.0.0"
