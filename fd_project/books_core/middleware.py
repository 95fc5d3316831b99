from django.utils.deprecation import MiddlewareMixin

from .auth import get_authenticator


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Attach .principal and .company to every request
    def __init__(self, get_response=None):
        super().__init__(get_response)
        self.authenticator = get_authenticator()

    def process_request(self, request):
        principal = self.authenticator.authenticate(request)
        request.principal = principal
        # Unauthenticated users, and users without a membership, get no company
        request.company = principal.company if principal else None
