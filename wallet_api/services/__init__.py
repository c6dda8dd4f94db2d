"""
High-level use cases for the wallet API.

Each service module orchestrates the repository and core adapters to
implement business rules (signup, verify email, fund wallet, record a
transaction, etc.).

Routers (FastAPI endpoints) call these services instead of manipulating
database sessions directly.
"""
