from django.contrib import admin
from .models import SellerApplication


@admin.register(SellerApplication)
class SellerApplicationAdmin(admin.ModelAdmin):
    list_display = ("id", "boutique_name", "trade_license", "created_at")
    search_fields = ("boutique_name", "trade_license")
    readonly_fields = ("created_at",)
