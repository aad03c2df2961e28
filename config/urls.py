from django.contrib import admin
from django.urls import path, include
from django.conf import settings

# Ensure ADMIN_URL does not start with a slash for path() and has a trailing slash
admin_url = settings.ADMIN_URL.strip("/") + "/"

urlpatterns = [
    path(admin_url, admin.site.urls),

    # Storefront API (no trailing slash)
    path('api/', include('apps.catalog.urls')),
    path('api/', include('apps.accounts.urls')),
    path('api/', include('apps.orders.urls')),
    path('api/', include('apps.sellers.urls')),

    # Operations
    path('api/', include('apps.utils.urls')),
]
