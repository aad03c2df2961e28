# apps/catalog/serializers.py
from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "price", "image", "description"]
        read_only_fields = fields


class ProductSeedSerializer(serializers.Serializer):
    """
    One entry of the seed file (products.json).
    """
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField(min_value=0)
    image = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
