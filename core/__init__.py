"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Event bus, audit and webhook handlers
- Celery tasks and management commands
- Metrics and health endpoints
"""
