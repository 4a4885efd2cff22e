"""Settings for the files app (tags, hierarchy, uploads)."""

from tagshelf.settings.components import config

# Deepest allowed position of a tag in the hierarchy (root has depth 0)
MAX_TAG_DEPTH = config('MAX_TAG_DEPTH', cast=int, default=5)

# Length of generated tag and file identifiers
ID_LENGTH = config('ID_LENGTH', cast=int, default=10)

# Lifetime of presigned upload URLs in seconds
UPLOAD_URL_EXPIRY = config('UPLOAD_URL_EXPIRY', cast=int, default=3600)
