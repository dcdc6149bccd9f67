"""
Core app for Newsdesk.

Provides shared base models, staff roles, error handling, request tracing,
public cache invalidation and health checks.
"""
