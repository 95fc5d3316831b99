from .auditlog import AuditLogAdmin
from .document import DocumentAdmin
from .forms import UserAdminChangeForm, UserAdminCreationForm
from .journal import JournalEntryAdmin
from .membership import CompanyAdmin, EntityMembershipAdmin, UserAdmin
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin
from .statement import FinancialStatementAdmin
