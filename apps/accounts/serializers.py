from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Member profile with points balance and community."""
    
    points = serializers.IntegerField(source='account.balance', read_only=True)
    community_id = serializers.CharField(source='account.community_id', read_only=True)
    
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'profile_image_url',
            'community_id',
            'points',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""
    
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    community_id = serializers.SlugField(max_length=50, write_only=True)
    
    class Meta:
        model = User
        fields = [
            'email',
            'password',
            'password_confirm',
            'display_name',
            'profile_image_url',
            'community_id',
        ]
        # Duplicate emails are reported by the registration service
        extra_kwargs = {'email': {'validators': []}}
    
    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""
    
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Validate input for profile updates.

    Fields:
        display_name (str): New display name
        profile_image_url (str): New avatar URL
        community_id (str): Move to another community
    """
    
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    profile_image_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    community_id = serializers.SlugField(max_length=50, required=False)


class DeactivateAccountSerializer(serializers.Serializer):
    """Password confirmation for deactivation."""
    
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
