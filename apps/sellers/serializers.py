from rest_framework import serializers

REQUIRED = {
    "required": "All fields are required",
    "blank": "All fields are required",
    "null": "All fields are required",
}


class SellerApplicationSerializer(serializers.Serializer):
    """
    Storefront form payload (camelCase keys).
    """
    boutiqueName = serializers.CharField(max_length=255, source="boutique_name", error_messages=REQUIRED)
    tradeLicense = serializers.CharField(max_length=255, source="trade_license", error_messages=REQUIRED)
    description = serializers.CharField(error_messages=REQUIRED)
