"""
Database models for the BloodConnect backend.

These models capture the two user roles (donors and hospitals) through a
single :class:`Profile` table, the blood requests hospitals post and an
append-only audit trail.  Field names mirror the JSON exposed to the
front-end so that serialisation stays a thin mapping.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


BLOOD_TYPES = ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')
BLOOD_TYPE_CHOICES = [(t, t) for t in BLOOD_TYPES]

PROFILE_TYPE_CHOICES = [
    ('donor', 'Donor'),
    ('hospital', 'Hospital'),
]

URGENCY_CHOICES = [
    ('low', 'Low'),
    ('medium', 'Medium'),
    ('high', 'High'),
    ('critical', 'Critical'),
]

REQUEST_STATUS_CHOICES = [
    ('active', 'Active'),
    ('fulfilled', 'Fulfilled'),
    ('cancelled', 'Cancelled'),
]


class User(AbstractUser):
    """Account used for sign-in.  Login is by email address."""
    email = models.EmailField(unique=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def __str__(self) -> str:
        return self.email


class Profile(models.Model):
    """Descriptive record of a donor or hospital account.

    Exactly one profile exists per account.  ``blood_type`` is only
    meaningful for donors and is always stored as NULL for hospitals.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    type = models.CharField(max_length=10, choices=PROFILE_TYPE_CHOICES, db_index=True)
    name = models.CharField(max_length=255)
    contact = models.CharField(max_length=64)
    address = models.CharField(max_length=255)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_donor(self) -> bool:
        return self.type == 'donor'

    @property
    def is_hospital(self) -> bool:
        return self.type == 'hospital'

    def save(self, *args, **kwargs):
        if not self.is_donor:
            self.blood_type = None
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"


class BloodRequest(models.Model):
    """A hospital's posted need for units of a given blood type."""
    hospital = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='blood_requests',
        limit_choices_to={'type': 'hospital'},
    )
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, db_index=True)
    units_needed = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    urgency_level = models.CharField(max_length=10, choices=URGENCY_CHOICES)
    # listings only show active requests
    status = models.CharField(max_length=10, choices=REQUEST_STATUS_CHOICES, default='active', db_index=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.blood_type} x{self.units_needed} ({self.urgency_level}) for {self.hospital.name}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='core_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='core_audit_object_idx'),
        ]
