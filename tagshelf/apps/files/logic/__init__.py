"""Business logic layer for files app.

This package contains all business logic for tags and files:
- Tag CRUD scoped per owner
- Tag hierarchy (single parent, no cycles, bounded depth)
- Tag-file associations and tag filters
- File records, presigned uploads and the file listing query

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
Every function takes the caller's user ID explicitly.
"""
