from django.core.exceptions import ValidationError


class UnbalancedJournalError(Exception):
    """Raised when a batch of journal rows fails the double-entry balance check."""
    pass


class DocumentLockedError(ValidationError):
    """Raised when a document that already has journal entries is re-typed or re-extracted."""
    pass
