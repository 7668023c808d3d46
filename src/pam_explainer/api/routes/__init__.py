"""API route modules.

- rules: Policy parsing and evaluation
- health: Liveness and version
"""

from . import health, rules

__all__ = ["health", "rules"]
