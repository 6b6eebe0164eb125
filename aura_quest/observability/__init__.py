"""
Observability module for aura-quest.

This module provides:
- Metrics collection with Prometheus
"""

__all__ = ["metrics"]
