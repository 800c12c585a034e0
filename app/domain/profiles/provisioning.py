"""
Signup-time profile provisioning.

A SQLAlchemy ``after_insert`` listener on ``IdentityUser`` inserts the
matching profile on the same connection, inside the identity's transaction.
If the profile insert fails (for example an out-of-range role in the signup
metadata), the flush fails and the identity is rolled back with it.
"""

from typing import Any, Dict, Mapping, Optional
import enum
import logging
import uuid

from sqlalchemy import event, insert

from app.domain.identity.models import IdentityUser
from app.domain.profiles.models import Profile

logger = logging.getLogger(__name__)

DEFAULT_FULL_NAME = "Unknown User"
DEFAULT_ROLE = "patient"


def _metadata_text(metadata: Mapping[str, Any], key: str) -> Optional[str]:
    value = metadata.get(key)
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    return str(value)


def build_profile_values(
    identity_id: uuid.UUID,
    email: str,
    metadata: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Profile row for a new identity.

    Missing or null metadata keys fall back to the defaults; any other value,
    including an empty string, is used as given. The role is not validated
    here: the profiles table's check constraint is the only gate.
    """
    metadata = metadata or {}
    full_name = _metadata_text(metadata, "full_name")
    role = _metadata_text(metadata, "role")
    return {
        "id": identity_id,
        "email": email,
        "full_name": full_name if full_name is not None else DEFAULT_FULL_NAME,
        "role": role if role is not None else DEFAULT_ROLE,
    }


@event.listens_for(IdentityUser, "after_insert")
def handle_new_identity(mapper, connection, target: IdentityUser) -> None:
    """Create the profile for a freshly inserted identity"""
    values = build_profile_values(target.id, target.email, target.raw_user_meta_data)
    connection.execute(insert(Profile.__table__).values(**values))
    logger.info(f"Provisioned profile {values['id']} with role {values['role']}")
