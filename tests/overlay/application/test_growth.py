"""Tests for CollectionGrowthPolicy."""

import pytest

from env_overlay.overlay.application.growth import CollectionGrowthPolicy
from env_overlay.overlay.infrastructure.errors import MissingCapabilityError


class Unbuildable:
    def __init__(self, required: str) -> None:
        self.required = required


class TestEnsureLength:
    """ensure_length grows lazily with default elements and never shrinks."""

    def test_grows_to_requested_length(self) -> None:
        items: list[int] = [7]
        appended = CollectionGrowthPolicy().ensure_length(
            items=items, length=3, factory=int, path="vector"
        )

        assert items == [7, 0, 0]
        assert appended == 2

    def test_never_shrinks(self) -> None:
        items = [1, 2, 3]
        appended = CollectionGrowthPolicy().ensure_length(
            items=items, length=1, factory=int, path="vector"
        )

        assert items == [1, 2, 3]
        assert appended == 0

    def test_each_slot_gets_its_own_default(self) -> None:
        items: list[list[int]] = []
        CollectionGrowthPolicy().ensure_length(
            items=items, length=2, factory=list, path="vector"
        )

        assert items[0] is not items[1]

    def test_non_sequence_raises_missing_capability(self) -> None:
        with pytest.raises(MissingCapabilityError) as exc_info:
            CollectionGrowthPolicy().ensure_length(
                items=(1, 2), length=3, factory=int, path="vector"
            )

        assert exc_info.value.path == "vector"

    def test_failing_factory_raises_missing_capability(self) -> None:
        with pytest.raises(MissingCapabilityError):
            CollectionGrowthPolicy().ensure_length(
                items=[], length=1, factory=Unbuildable, path="things"
            )

    def test_missing_factory_raises_missing_capability(self) -> None:
        with pytest.raises(MissingCapabilityError):
            CollectionGrowthPolicy().ensure_length(
                items=[], length=1, factory=None, path="things"
            )


class TestPlace:
    """place overwrites existing slots and appends at the boundary."""

    def test_overwrites_existing_slot(self) -> None:
        items = [1, 2, 3]
        appended = CollectionGrowthPolicy().place(
            items=items, index=1, value=9, factory=int, path="vector[1]"
        )

        assert items == [1, 9, 3]
        assert appended == 0

    def test_appends_at_boundary(self) -> None:
        items = [1]
        appended = CollectionGrowthPolicy().place(
            items=items, index=1, value=5, factory=int, path="vector[1]"
        )

        assert items == [1, 5]
        assert appended == 1

    def test_fills_gap_with_defaults(self) -> None:
        items: list[int] = []
        CollectionGrowthPolicy().place(
            items=items, index=2, value=5, factory=int, path="vector[2]"
        )

        assert items == [0, 0, 5]

    def test_none_collection_raises_missing_capability(self) -> None:
        with pytest.raises(MissingCapabilityError):
            CollectionGrowthPolicy().place(
                items=None, index=0, value=1, factory=int, path="vector[0]"
            )
