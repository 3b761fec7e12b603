"""Typed block content.

Content is a tagged variant persisted as JSON (``{"kind": "paragraph",
"markdown": "..."}``). Pydantic's discriminated unions handle both
validation and the JSON round trip.
"""

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Content(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def reference_text(self) -> str:
        """Text that may embed references to other blocks."""
        return ""


class PageContent(_Content):
    """A page: the title of a subtree."""

    kind: Literal["page"] = "page"
    title: str


class HeadingContent(_Content):
    """A markdown heading."""

    kind: Literal["heading"] = "heading"
    markdown: str

    def reference_text(self) -> str:
        return self.markdown


class ParagraphContent(_Content):
    """A markdown paragraph."""

    kind: Literal["paragraph"] = "paragraph"
    markdown: str

    def reference_text(self) -> str:
        return self.markdown


BlockContent = Annotated[
    Union[PageContent, HeadingContent, ParagraphContent],
    Field(discriminator="kind"),
]

_adapter: TypeAdapter = TypeAdapter(BlockContent)


def load_content(raw: Any) -> BlockContent:
    """Build block content from a JSON string, bytes or decoded mapping."""
    if isinstance(raw, (str, bytes, bytearray)):
        return _adapter.validate_json(raw)
    return _adapter.validate_python(raw)


def dump_content(content: BlockContent) -> str:
    """Serialize block content to the JSON stored in the ``content`` column."""
    return json.dumps(content.model_dump(mode="json"), sort_keys=True)
