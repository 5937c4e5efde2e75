import logging
from decimal import Decimal
from typing import Optional
from ..models import AuditLog, Company

logger = logging.getLogger(__name__)


def _jsonable(changes):
    # JSONField cannot store Decimal or date values as-is
    if changes is None:
        return None
    out = {}
    for key, value in changes.items():
        if isinstance(value, Decimal):
            out[key] = str(value)
        elif hasattr(value, "isoformat"):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


def log_action(
    *,
    action: str,
    instance,
    user=None,
    company: Optional[Company] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Writes one AuditLog row per business event (create, post, confirm, ...).
    """

    if not company:
        company = getattr(instance, "company", None)

    # Only members are recorded against a company
    if user is not None and company is not None and not user.memberships.filter(
        company=company, is_active=True
    ).exists():
        logger.warning(
            "audit: %s is not a member of %s, recording %s without user",
            user, company, action,
        )
        user = None

    return AuditLog.objects.create(
        company=company,
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=_jsonable(changes),
    )
