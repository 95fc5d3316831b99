from decimal import Decimal

from django.contrib.auth.base_user import BaseUserManager
from django.db import models, transaction

from .exceptions import UnbalancedJournalError
from .services.generation import drafts_are_balanced
from .services.periods import resolve_period


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        return self.filter(company=company)


class TenantManager(models.Manager):
    # every model using TenantManager can call:
    # Document.objects.for_company(request.company)
    def get_queryset(self):
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company):
        return self.get_queryset().for_company(company)


class CompanyUserManager(BaseUserManager):
    """ Enforce rules around how users are created """

    use_in_migrations = True

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:
            raise ValueError("The given username must be set")
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Used by Django when running `createsuperuser`
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)


# ---------- Journal entries ----------
class JournalEntryQuerySet(TenantQuerySet):
    def for_document(self, document):
        return self.filter(document=document)

    def generated(self):
        # rows derived from a source document
        return self.filter(document__isnull=False)

    def manual(self):
        return self.filter(document__isnull=True)

    def in_period(self, period_label):
        """Filter by a period label ('2025', 'Q1_2025', 'FY2024-25', '2025-04').

        Empty or 'all' leaves the queryset untouched.
        """
        bounds = resolve_period(period_label)
        if bounds is None:
            return self
        return self.filter(date__gte=bounds.start, date__lte=bounds.end)

    def totals(self):
        aggs = self.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        # Django returns None for an empty set
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )


class JournalEntryManager(TenantManager):
    def get_queryset(self):
        return JournalEntryQuerySet(self.model, using=self._db)

    def for_document(self, document):
        return self.get_queryset().for_document(document)

    def generated(self):
        return self.get_queryset().generated()

    def in_period(self, period_label):
        return self.get_queryset().in_period(period_label)

    def insert_if_absent_for_document(self, document, drafts, user=None):
        """
        Persist generated drafts for a document unless it already has entries.

        The existence check and the insert run in one transaction holding a
        row lock on the document, so two concurrent generation requests for
        the same document cannot both write.

        Returns (created_rows, inserted).
        """
        drafts = list(drafts)
        if not drafts_are_balanced(drafts):
            raise UnbalancedJournalError("Journal not balanced: debits and credits differ")

        document_model = self.model._meta.get_field("document").related_model
        with transaction.atomic():
            # Lock the document row, later callers wait here
            locked = document_model.objects.select_for_update().get(pk=document.pk)

            if self.filter(document=locked).exists():
                return [], False

            rows = [
                self.model(
                    company_id=locked.company_id,
                    document=locked,
                    created_by=user,
                    **draft.as_fields(),
                )
                for draft in drafts
            ]
            return self.bulk_create(rows), True
