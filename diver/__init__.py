"""
diver.

Operator-facing client for the Docker UCP control plane and the Docker
Store billing API.
"""

__version__ = "0.3.0"
