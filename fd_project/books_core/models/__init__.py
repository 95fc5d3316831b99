from .auditlog import AuditLog
from .document import Document
from .entitymembership import Company, EntityMembership, User
from .journal import JournalEntry
from .statement import FinancialStatement
