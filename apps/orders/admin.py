import json
from django.contrib import admin
from django.utils.html import format_html
from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are immutable once placed; the admin is read-only.
    """
    list_display = ('id', 'total', 'payment_method', 'item_count', 'created_at')
    list_filter = ('payment_method', 'created_at')
    readonly_fields = ('items_pretty', 'total', 'payment_method', 'created_at')
    exclude = ('items',)
    date_hierarchy = 'created_at'

    def items_pretty(self, obj):
        return format_html("<pre>{}</pre>", json.dumps(obj.items, indent=2, ensure_ascii=False))
    items_pretty.short_description = "Items"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
