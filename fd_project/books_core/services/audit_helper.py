from typing import Optional

from ..models import AuditLog, Company


def log_action(
    *,
    action: str,
    instance=None,
    object_type: Optional[str] = None,
    object_id=None,
    user=None,
    company: Optional[Company] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Pass either the affected `instance`, or `object_type` / `object_id` when
    the row is already gone (bulk deletes).
    """
    if instance is not None:
        company = company or getattr(instance, "company", None)
        object_type = object_type or instance.__class__.__name__
        object_id = instance.pk if object_id is None else object_id

    # anonymous / system callers are logged without a user
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None

    return AuditLog.objects.create(
        company=company,
        user=user,
        action=action,
        object_type=object_type or "",
        object_id=str(object_id if object_id is not None else ""),
        changes=changes,
    )
