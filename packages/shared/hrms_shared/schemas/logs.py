import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .common import AuditAction


class LogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    organisation_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    action: AuditAction
    meta: dict[str, Any]
    timestamp: datetime
