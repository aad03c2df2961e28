# apps/catalog/admin.py
from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "image")
    search_fields = ("name", "description")
    list_editable = ("price",)
    ordering = ("id",)
