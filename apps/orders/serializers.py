from rest_framework import serializers


class OrderLineSerializer(serializers.Serializer):
    """
    One cart line as sent by the storefront. Only `id` is trusted;
    name/price/image from the client are ignored.
    """
    id = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    items = OrderLineSerializer(many=True, allow_empty=True)
    total = serializers.IntegerField(min_value=0)
    payment = serializers.CharField(max_length=255)
