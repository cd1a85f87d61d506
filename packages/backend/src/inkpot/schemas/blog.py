"""Schemas for blog entries."""

import re
import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from inkpot.errors import InvalidIdentifier
from inkpot.schemas import validate

# Canonical hyphenated form only; braces, urn: prefixes etc. are rejected.
BLOG_ID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class BlogInput(BaseModel):
    """Create/update body. Unknown keys (token, author, ...) are ignored."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class BlogRead(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    author: uuid.UUID = Field(validation_alias=AliasChoices("author", "author_id"))
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def validate_blog_input(data: dict) -> BlogInput:
    return validate(BlogInput, data, "Invalid blog data.")


def parse_blog_id(raw: str) -> uuid.UUID:
    if not BLOG_ID_RE.match(raw or ""):
        raise InvalidIdentifier()
    return uuid.UUID(raw)
