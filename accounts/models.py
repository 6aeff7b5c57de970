from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.conf import settings
from django.utils import timezone
import uuid


class CustomUserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Remove username and use email instead
    username = None
    email = models.EmailField(unique=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.email


def default_currency():
    return settings.DEFAULT_CURRENCY


class Restaurant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    currency = models.CharField(max_length=10, default=default_currency)
    address = models.CharField(max_length=255, blank=True, null=True)
    settings = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='restaurants_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'restaurants'
        ordering = ['name']

    def __str__(self):
        return self.name


class RestaurantUser(models.Model):
    """Membership of a user in a restaurant"""
    OWNER = 'owner'
    STAFF = 'staff'
    MEMBER = 'member'
    ROLE_CHOICES = (
        (OWNER, 'Owner'),
        (STAFF, 'Staff'),
        (MEMBER, 'Member'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='restaurant_memberships')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=STAFF)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'restaurant_users'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['restaurant', 'user'], name='unique_restaurant_user'),
        ]

    def __str__(self):
        return f"{self.user.email} -> {self.role} ({self.restaurant.name})"


class Invitation(models.Model):
    """Staff invitation; `expired` is derived from expires_at, never stored"""
    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REVOKED = 'revoked'
    STATUS_EXPIRED = 'expired'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REVOKED, 'Revoked'),
    )

    DELIVERY_QUEUED = 'queued'
    DELIVERY_SENT = 'sent'
    DELIVERY_FAILED = 'failed'
    DELIVERY_CHOICES = (
        (DELIVERY_QUEUED, 'Queued'),
        (DELIVERY_SENT, 'Sent'),
        (DELIVERY_FAILED, 'Failed'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name='invitations')
    email = models.EmailField()
    role = models.CharField(max_length=20, choices=RestaurantUser.ROLE_CHOICES, default=RestaurantUser.STAFF)
    token = models.CharField(max_length=128, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    delivery_status = models.CharField(max_length=20, choices=DELIVERY_CHOICES, default=DELIVERY_QUEUED)
    expires_at = models.DateTimeField()
    invited_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='invitations_sent'
    )
    accepted_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='invitations_accepted'
    )
    accepted_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'restaurant_invitations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['restaurant', 'status'], name='invitation_restaurant_status'),
            models.Index(fields=['email', 'restaurant'], name='invitation_email_restaurant'),
        ]

    def __str__(self):
        return f"Invitation to {self.email} for {self.restaurant.name}"

    def is_expired(self, now=None):
        now = now or timezone.now()
        return self.status == self.STATUS_PENDING and self.expires_at <= now

    @property
    def effective_status(self):
        return self.STATUS_EXPIRED if self.is_expired() else self.status
