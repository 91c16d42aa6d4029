"""
Core infrastructure: configuration, errors, logging and metrics.
"""
