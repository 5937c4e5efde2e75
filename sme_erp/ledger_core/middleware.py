from django.utils.deprecation import MiddlewareMixin
from .models import Company


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Run on every request and attach request.company,
    # which views pass explicitly into the ledger services
    def process_request(self, request):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            # Unauthenticated users
            request.company = None
            return

        memberships = Company.objects.filter(
            memberships__user=user, memberships__is_active=True
        )

        # If user switched companies, choice is stored in the session
        company_id = request.session.get("active_company_id")
        if not company_id:
            # Default company fallback
            company_id = user.default_company_id

        # User must be an active member of that company, so a tampered
        # session cannot "jump" into another tenant
        request.company = (
            memberships.filter(id=company_id).first() if company_id else None
        )
