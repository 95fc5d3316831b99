"""
Who is calling, and for which company.

Views never look at sessions or tokens directly: the middleware asks the
authenticator named by settings.BOOKS_AUTHENTICATOR for a Principal and
puts it on the request.
"""
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.utils.module_loading import import_string

from .models import Company


@dataclass(frozen=True)
class Principal:
    user: object
    company: Optional[Company]
    role: Optional[str] = None

    @property
    def can_write(self):
        return self.company is not None and self.role not in (None, "viewer")


class BaseAuthenticator:
    def authenticate(self, request) -> Optional[Principal]:
        """Return a Principal for the request, or None when anonymous."""
        raise NotImplementedError


class SessionMembershipAuthenticator(BaseAuthenticator):
    """
    Django session user plus company membership.
    The company is the user's default_company, unless the session carries an
    "active_company_id" the user is an active member of.
    """

    session_key = "active_company_id"

    def authenticate(self, request):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None

        company = getattr(user, "default_company", None)

        # If user switched companies, choice is stored in the session
        session = getattr(request, "session", None)
        company_id = session.get(self.session_key) if session is not None else None
        if company_id:
            # must be a member: a tampered session cannot jump tenants
            company = Company.objects.filter(
                pk=company_id,
                memberships__user=user,
                memberships__is_active=True,
            ).first()

        membership = user.membership_for(company) if company is not None else None
        if membership is None:
            # no active membership, no tenant
            return Principal(user=user, company=None)
        return Principal(user=user, company=company, role=membership.role)


def get_authenticator():
    return import_string(settings.BOOKS_AUTHENTICATOR)()
