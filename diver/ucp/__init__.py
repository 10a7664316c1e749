"""
UCP.

Authenticated session, error decoding, resource resolution and report
rendering for the Docker UCP control plane.
"""
