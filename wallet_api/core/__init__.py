"""
Core utilities shared across the wallet API.

This package hosts:
- configuration helpers (env vars, secrets, TTLs)
- cross-cutting services such as logging, the email adapter,
  password hashing and identity tokens.

Routers and services depend on these primitives instead of reading the
environment or talking to SMTP directly.
"""
