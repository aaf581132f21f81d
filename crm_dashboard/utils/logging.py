import logging
from typing import Optional, Any

from ..schemas.auth import AuthUser

audit_logger = logging.getLogger("crm_dashboard.audit")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_action(
    user: AuthUser | None,
    action: str,
    resource_type: str,
    resource_id: Optional[Any] = None,
    details: Optional[Any] = None
):
    """
    Utility function to record a dashboard mutation in the audit log.
    'user' is the AuthUser of the current session.
    """
    try:
        audit_logger.info(
            "%s %s %s by user=%s name=%s role=%s details=%s",
            action,
            resource_type,
            resource_id,
            user.id if user else None,
            (user.full_name or user.phone) if user else None,
            user.role.value if user else None,
            details,
        )
    except Exception as e:
        # Auditing must never break the request that triggered it
        logging.getLogger(__name__).error("FAILED TO WRITE AUDIT LOG: %s", e)
