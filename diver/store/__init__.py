"""
Store.

Subscription queries against the Docker Store billing API.
"""
