"""Tests for block content and node entities."""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from canopy.core.value_objects import NavigatorId
from canopy.features.content.entities import (
    ContentNode,
    FractionalIndex,
    HeadingContent,
    PageContent,
    ParagraphContent,
    dump_content,
    load_content,
)


class TestBlockContent:
    """Tagged content variants."""

    def test_load_dispatches_on_kind(self):
        assert load_content('{"kind": "page", "title": "Home"}') == PageContent(title="Home")
        assert load_content({"kind": "heading", "markdown": "# Hi"}) == HeadingContent(markdown="# Hi")
        assert isinstance(load_content(b'{"kind": "paragraph", "markdown": ""}'), ParagraphContent)

    def test_dump_includes_kind(self):
        assert json.loads(dump_content(ParagraphContent(markdown="x"))) == {"kind": "paragraph", "markdown": "x"}

    @pytest.mark.parametrize("raw", [
        {"kind": "table", "rows": []},
        {"title": "no kind"},
        {"kind": "page", "title": "Home", "extra": 1},
        {"kind": "paragraph"},
    ])
    def test_rejects_unknown_shapes(self, raw):
        with pytest.raises(PydanticValidationError):
            load_content(raw)

    def test_only_text_blocks_carry_references(self):
        assert PageContent(title="[[Abc1234]]").reference_text() == ""
        assert HeadingContent(markdown="[[Abc1234]]").reference_text() == "[[Abc1234]]"


class TestContentNode:
    """Node helpers."""

    def test_create(self):
        owner = NavigatorId.generate()
        node = ContentNode.create(PageContent(title="Home"), FractionalIndex.after(), owner_id=owner)

        assert node.is_root
        assert node.is_owned_by(owner)
        assert not node.is_owned_by(NavigatorId.generate())
        assert node.created_at is None

    def test_unowned_node(self):
        node = ContentNode.create(PageContent(title="Home"), FractionalIndex.after())

        assert not node.is_owned_by(NavigatorId.generate())

    def test_touched_keeps_created_at(self):
        first = datetime(2025, 1, 1, tzinfo=timezone.utc)
        later = datetime(2025, 2, 1, tzinfo=timezone.utc)
        node = ContentNode.create(PageContent(title="Home"), FractionalIndex.after()).touched(first)

        again = node.touched(later)

        assert again.created_at == first
        assert again.updated_at == later
        assert node.updated_at == first
