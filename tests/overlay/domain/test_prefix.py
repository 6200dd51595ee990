"""Tests for the Prefix value object."""

import pytest
from pydantic import ValidationError

from env_overlay.overlay.domain.prefix import Prefix


class TestPrefixChild:
    """child() returns a new prefix and never mutates the parent."""

    def test_child_appends_segment(self) -> None:
        prefix = Prefix(root="APP").child("server").child("port")
        assert prefix.segments == ("server", "port")
        assert prefix.root == "APP"

    def test_sibling_prefixes_do_not_share_segments(self) -> None:
        parent = Prefix(root="APP").child("server")
        first = parent.child("port")
        second = parent.child("host")

        assert parent.segments == ("server",)
        assert first.segments == ("server", "port")
        assert second.segments == ("server", "host")

    def test_index_segments_stay_integers(self) -> None:
        prefix = Prefix(root="APP").child("vector").child(3)
        assert prefix.segments[-1] == 3

    def test_prefix_is_frozen(self) -> None:
        prefix = Prefix(root="APP")
        with pytest.raises(ValidationError):
            prefix.root = "OTHER"  # type: ignore[misc]


class TestPrefixDotted:
    """dotted() renders an attribute-style path for messages and logs."""

    def test_nested_path(self) -> None:
        prefix = Prefix(root="APP").child("server").child("port")
        assert prefix.dotted() == "server.port"

    def test_indexed_path(self) -> None:
        prefix = Prefix(root="APP").child("servers").child(0).child("port")
        assert prefix.dotted() == "servers[0].port"

    def test_root_path(self) -> None:
        assert Prefix(root="APP").dotted() == "<root>"
