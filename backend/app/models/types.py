"""
Column types shared by the MailChimp models.

Structured provider fields (contact blocks, locations, tags, ...) are kept
as JSON serialized into a TEXT column so the schema stays portable between
SQLite and PostgreSQL.
"""

import json
from typing import Any, Optional

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator


class JSONText(TypeDecorator):
    """Stores any JSON-serializable value as text; NULL stays NULL."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value: Optional[str], dialect) -> Any:
        if value is None:
            return None
        return json.loads(value)
