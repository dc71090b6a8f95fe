from rest_framework import serializers

from ..models import User
from .base import CamelModelSerializer


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class UserSerializer(CamelModelSerializer):
    """Staff account. The password is write-only and stored hashed."""
    password = serializers.CharField(write_only=True, min_length=6, trim_whitespace=False)
    sanitized_fields = ('name', 'specialty')

    class Meta:
        model = User
        fields = ['id', 'username', 'password', 'name', 'email', 'role', 'specialty', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'email': {'required': False}}

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        user = super().update(instance, validated_data)
        if password:
            user.set_password(password)
            user.save(update_fields=['password'])
        return user
