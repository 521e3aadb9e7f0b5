from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "is_driver",
        ]
        read_only_fields = ["id", "email"]


class UserBasicSerializer(serializers.ModelSerializer):
    """
    Lite version of user info embedded in ride / booking / review payloads.
    """
    class Meta:
        model = User
        fields = ["id", "name", "phone"]


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data["email"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        return user


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    is_driver = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = User
        fields = ['name', 'email', 'password', 'phone', 'is_driver']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User already exists")
        return value.lower()

    def create(self, validated_data):
        email = validated_data['email']
        user = User.objects.create_user(
            username=email[:150],
            email=email,
            password=validated_data['password'],
            name=validated_data['name'],
            phone=validated_data.get('phone', ''),
            is_driver=validated_data.get('is_driver', False),
        )
        return user


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Partial profile update (name, phone, driver flag)."""

    class Meta:
        model = User
        fields = ['name', 'phone', 'is_driver']
