"""
Shared utilities for the Budget Workbook services.

This package contains code shared across services:
- observability: Telemetry, logging, and privacy utilities
"""
