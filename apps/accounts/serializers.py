from rest_framework import serializers


class CredentialsSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=255, required=False, allow_blank=True)
    password = serializers.CharField(max_length=128, required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs.get("email") or not attrs.get("password"):
            raise serializers.ValidationError("Email and password are required")
        return attrs
