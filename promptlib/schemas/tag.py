"""Tag schemas."""
from uuid import UUID

from promptlib.schemas.base import BaseSchema


class TagResponse(BaseSchema):
    """Tag entry for autocomplete lists."""
    id: UUID
    name: str
