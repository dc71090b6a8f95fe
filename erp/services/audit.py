from typing import Optional, Any, Dict

from erp.models import AuditEvent, User


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    # AnonymousUser and None are both recorded without a user
    if user is not None and not getattr(user, 'is_authenticated', False):
        user = None
    return AuditEvent.objects.create(
        user=user,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )
