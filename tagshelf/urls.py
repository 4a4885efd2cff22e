"""Main URL mapping configuration file.

The tagging core is consumed as a library by the HTTP layer; only the
admin site is routed here.
"""

from django.contrib import admin
from django.urls import path

admin.autodiscover()

urlpatterns = [
    path('admin/', admin.site.urls),
]
