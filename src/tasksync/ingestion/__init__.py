"""Response-boundary normalization.

Every task payload received from the backend passes through this package
before it reaches models or the state store.
"""
