"""Django settings for tagshelf project.

Settings are split into components and assembled with django-split-settings.
Values that differ between environments are read via python-decouple from
``config/.env`` or the process environment.
"""

import django_stubs_ext
from split_settings.tools import include

# Monkeypatching Django, so stubs will work for all generics,
# see: https://github.com/typeddjango/django-stubs/tree/master/django_stubs_ext
django_stubs_ext.monkeypatch()

include(
    'components/common.py',
    'components/database.py',
    'components/logging.py',
    'components/storages.py',
    'components/files.py',
)
