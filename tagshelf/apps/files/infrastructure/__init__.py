"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO/R2) with presigned uploads
- Identifier generation for tags and files

Keep infrastructure concerns separate from business logic.
"""
