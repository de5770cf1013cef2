"""
Domain layer for form submission validation.

This layer contains:
- Data models (type-safe structures)
- Business logic (parse, resolve and validate pipeline)
- Error and result types (explicit success/failure handling)
"""
