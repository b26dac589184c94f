"""
This package contains repository implementations for database operations.

Repositories provide a clean abstraction layer for database access,
implementing the repository pattern to separate catalog logic from
data access concerns.
"""
