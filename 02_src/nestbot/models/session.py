"""Session data model."""

from dataclasses import dataclass, field
from datetime import datetime

from .context import Context


@dataclass
class Session:
    """Per-user conversation record."""

    id: str
    user_id: str
    created_at: datetime
    context: Context = field(default_factory=Context)
