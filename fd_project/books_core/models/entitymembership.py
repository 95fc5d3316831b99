from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models

from ..managers import CompanyUserManager, TenantManager


# ---------- Tenant / Company ----------
class Company(models.Model):
    """Tenant. Documents, journal entries and statements never cross companies."""

    name = models.CharField(max_length=200)

    slug = models.SlugField(max_length=80, unique=True)

    # creator / admin of the company
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        # if user is deleted, company record stays
        on_delete=models.SET_NULL,
        related_name="owned_companies",
    )

    # Books are kept in one currency per company
    currency_code = models.CharField(max_length=10, default="INR")

    # Tax registration numbers printed on GST / TDS returns
    gstin = models.CharField(max_length=15, blank=True)
    tan = models.CharField(max_length=10, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name


# ---------- Custom User ----------
class User(AbstractUser):
    # Company used when the session has not switched to another one
    default_company = models.ForeignKey(
        "Company",
        # user might exist before being assigned a company
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="default_users",
    )

    phone = models.CharField(max_length=32, blank=True)

    objects = CompanyUserManager()

    class Meta:
        indexes = [models.Index(fields=["default_company"], name="user_default_company_idx")]

    def __str__(self):
        return self.get_full_name() or self.username

    def membership_for(self, company):
        """Active membership of this user in `company`, or None."""
        if company is None:
            return None
        return self.memberships.filter(company=company, is_active=True).first()


# ---------- EntityMembership ----------
class EntityMembership(models.Model):  # join model between User and Company

    ROLE_CHOICES = [
        ("owner", "Owner"),
        ("admin", "Admin"),
        # can generate and delete journal entries
        ("accountant", "Accountant"),
        ("viewer", "Viewer"),  # read-only access
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
    )

    company = models.ForeignKey(
        "Company", on_delete=models.CASCADE, related_name="memberships"
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="viewer")

    # Suspend access without deleting the record
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "company"], name="uq_user_company_membership"
            ),
        ]
        indexes = [
            models.Index(fields=["company", "user"], name="membership_company_user_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.company} ({self.role})"

    @property
    def can_write(self):
        return self.is_active and self.role != "viewer"

    def clean(self):
        """
        A user's default_company must be one of their memberships.
        The membership being validated counts, so the first membership
        for the default company can be created.
        """
        if self.user_id and self.user.default_company_id:
            default_company_pk = self.user.default_company_id

            existing = self.user.memberships.all()
            if self.pk:
                existing = existing.exclude(pk=self.pk)
            existing_company_ids = set(existing.values_list("company_id", flat=True))

            if (
                default_company_pk not in existing_company_ids
                and default_company_pk != self.company_id
            ):
                raise ValidationError(
                    f"Default company {self.user.default_company} must be a user's membership."
                )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
