"""
Serializers for authentication and staff profiles.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import StaffProfile

User = get_user_model()


class StaffProfileSerializer(serializers.ModelSerializer):
    """Serializer for StaffProfile model."""

    class Meta:
        model = StaffProfile
        fields = [
            'id',
            'role',
            'display_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'role', 'created_at', 'updated_at']


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User with nested profile."""

    profile = StaffProfileSerializer(source='staff_profile', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'is_active',
            'date_joined',
            'last_login',
            'profile',
        ]
        read_only_fields = ['id', 'username', 'date_joined', 'last_login', 'is_active']


class UserUpdateSerializer(serializers.ModelSerializer):
    """Serializer for updating user info."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'email']


class SignupSerializer(serializers.Serializer):
    """
    Create a staff account from a display name, email and password.

    The email doubles as the username. Duplicate emails are reported by the
    view as a 409, not as a field error.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=8)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        name = validated_data['name'].strip()
        first_name, _, last_name = name.partition(' ')
        user = User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=first_name[:150],
            last_name=last_name[:150],
        )
        return user


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Token serializer that adds role claims and user info to the response.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        token['username'] = user.username
        token['email'] = user.email

        if hasattr(user, 'staff_profile'):
            token['role'] = user.staff_profile.role

        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data
