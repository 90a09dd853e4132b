"""Shared helpers: typed errors, security primitives, rate limiting and view decorators."""
