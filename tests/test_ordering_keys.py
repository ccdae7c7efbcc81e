"""Tests for node ordering keys and their 32-bit encoding."""

from __future__ import annotations

from itertools import permutations

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from store_properties.domain.exceptions import (
    DuplicateOrderingAttributeError,
    InvalidOrderingKeyError,
    OrderingListError,
    OrderingListFullError,
)
from store_properties.domain.models import (
    CANONICAL_ORDERING_KEYS,
    CORES_ASC,
    CORES_DESC,
    MEMORY_ASC,
    MEMORY_DESC,
    OrderingAttribute,
    OrderingKey,
    SortDirection,
)
from store_properties.services.ordering_keys import (
    OrderingKeyList,
    create_key,
    from_byte,
    parse_key,
)


def _valid_lists() -> list[tuple[OrderingKey, ...]]:
    """Every ordered selection with at most one key per attribute."""
    selections: list[tuple[OrderingKey, ...]] = []
    for size in range(0, 5):
        for combo in permutations(CANONICAL_ORDERING_KEYS, size):
            attributes = [key.attribute for key in combo]
            if len(set(attributes)) == len(attributes):
                selections.append(combo)
    return selections


class TestOrderingKey:
    """Single key value semantics."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            (MEMORY_ASC, 0x81),
            (MEMORY_DESC, 0x01),
            (CORES_ASC, 0x82),
            (CORES_DESC, 0x02),
        ],
    )
    def test_to_byte(self, key: OrderingKey, expected: int) -> None:
        assert key.to_byte() == expected

    def test_from_byte_returns_canonical_instance(self) -> None:
        for key in CANONICAL_ORDERING_KEYS:
            assert from_byte(key.to_byte()) is key
            assert OrderingKey.from_byte(key.to_byte()) is key

    @pytest.mark.parametrize(
        "value", [0x00, 0x80, 0x03, 0x83, 0x11, 0x7F, 0xFF, 256, -1]
    )
    def test_from_byte_rejects_non_canonical(self, value: int) -> None:
        with pytest.raises(InvalidOrderingKeyError):
            from_byte(value)

    def test_create_key_returns_canonical_instance(self) -> None:
        assert (
            create_key(OrderingAttribute.CORES, SortDirection.ASCENDING) is CORES_ASC
        )
        assert create_key(1, 0) is MEMORY_DESC

    @pytest.mark.parametrize(
        ("attribute", "direction"),
        [
            (OrderingAttribute.NONE, SortDirection.DESCENDING),
            (OrderingAttribute.NONE, SortDirection.ASCENDING),
            (3, 0),
            (1, 0x81),
            (1, 0x40),
        ],
    )
    def test_create_key_rejects_non_canonical(
        self, attribute: int, direction: int
    ) -> None:
        with pytest.raises(InvalidOrderingKeyError):
            create_key(attribute, direction)

    def test_invalid_key_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            from_byte(0)

    def test_equality_is_structural(self) -> None:
        built = OrderingKey(
            attribute=OrderingAttribute.MEMORY, direction=SortDirection.ASCENDING
        )
        assert built == MEMORY_ASC
        assert built is not MEMORY_ASC
        assert hash(built) == hash(MEMORY_ASC)
        assert built != MEMORY_DESC

    def test_is_immutable(self) -> None:
        with pytest.raises(ValidationError):
            MEMORY_ASC.direction = SortDirection.DESCENDING  # type: ignore[misc]

    def test_none_attribute_rejected_on_construction(self) -> None:
        with pytest.raises(ValidationError):
            OrderingKey(attribute=OrderingAttribute.NONE)

    def test_text_form(self) -> None:
        assert str(MEMORY_ASC) == "-Memory"
        assert str(CORES_DESC) == "Cores"
        assert repr(CORES_ASC) == "OrderingKey(-Cores)"


class TestParseKey:
    """Single token parsing."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("Memory", MEMORY_DESC),
            ("-Memory", MEMORY_ASC),
            ("cores", CORES_DESC),
            ("  -CORES ", CORES_ASC),
        ],
    )
    def test_accepts(self, token: str, expected: OrderingKey) -> None:
        assert parse_key(token) is expected

    @pytest.mark.parametrize("token", ["None", "-none", "Disk", "--Memory", "", "-"])
    def test_rejects(self, token: str) -> None:
        assert parse_key(token) is None


class TestOrderingKeyListBuilder:
    """Add semantics and list invariants."""

    def test_add_preserves_order_and_chains(self) -> None:
        keys = OrderingKeyList()
        result = keys.add(CORES_ASC).add(MEMORY_DESC)

        assert result is keys
        assert list(keys) == [CORES_ASC, MEMORY_DESC]
        assert len(keys) == 2
        assert keys[0] is CORES_ASC

    def test_duplicate_attribute_rejected_and_list_unchanged(self) -> None:
        keys = OrderingKeyList.of(CORES_DESC, MEMORY_ASC)

        with pytest.raises(DuplicateOrderingAttributeError, match="Cores"):
            keys.add(CORES_ASC)

        assert keys == [CORES_DESC, MEMORY_ASC]

    def test_full_list_rejected_and_length_unchanged(self) -> None:
        keys = OrderingKeyList()
        # Only two attributes exist, so four entries cannot come from add
        keys._keys.extend([MEMORY_ASC, CORES_ASC, MEMORY_DESC, CORES_DESC])

        with pytest.raises(OrderingListFullError):
            keys.add(MEMORY_ASC)

        assert len(keys) == 4

    def test_errors_share_base(self) -> None:
        assert issubclass(OrderingListFullError, OrderingListError)
        assert issubclass(DuplicateOrderingAttributeError, OrderingListError)

    def test_rejection_is_logged(self) -> None:
        keys = OrderingKeyList.of(MEMORY_ASC)

        with capture_logs() as logs, pytest.raises(DuplicateOrderingAttributeError):
            keys.add(MEMORY_DESC)

        assert logs[0]["event"] == "ordering_key_rejected"
        assert logs[0]["reason"] == "duplicate_attribute"

    def test_constructor_applies_add_rules(self) -> None:
        with pytest.raises(DuplicateOrderingAttributeError):
            OrderingKeyList([MEMORY_ASC, MEMORY_DESC])

    def test_copy_is_independent(self) -> None:
        original = OrderingKeyList.of(MEMORY_ASC)
        clone = original.copy()
        clone.add(CORES_DESC)

        assert len(original) == 1
        assert len(clone) == 2

    def test_empty_list_is_falsy(self) -> None:
        assert not OrderingKeyList()
        assert OrderingKeyList.of(MEMORY_ASC)

    def test_not_hashable(self) -> None:
        with pytest.raises(TypeError):
            hash(OrderingKeyList())


class TestEncoding:
    """32-bit packing."""

    def test_example_encoding(self) -> None:
        keys = OrderingKeyList.of(MEMORY_ASC, CORES_DESC)

        assert keys.to_int32() == 641
        assert int(keys) == 641
        assert (641).to_bytes(4, "little") == bytes([0x81, 0x02, 0x00, 0x00])

    def test_example_decoding(self) -> None:
        decoded = OrderingKeyList.from_int32(641)

        assert list(decoded) == [MEMORY_ASC, CORES_DESC]
        assert decoded[0] is MEMORY_ASC

    def test_empty(self) -> None:
        assert OrderingKeyList().to_int32() == 0
        assert len(OrderingKeyList.from_int32(0)) == 0

    @pytest.mark.parametrize("keys", _valid_lists())
    def test_round_trip(self, keys: tuple[OrderingKey, ...]) -> None:
        built = OrderingKeyList(keys)
        assert list(OrderingKeyList.from_int32(built.to_int32())) == list(keys)

    def test_high_byte_ascending_is_negative(self) -> None:
        keys = OrderingKeyList()
        keys._keys.extend([MEMORY_DESC, CORES_DESC, MEMORY_DESC, CORES_ASC])
        encoded = keys.to_int32()

        assert encoded < 0
        assert encoded == int.from_bytes(
            bytes([0x01, 0x02, 0x01, 0x82]), "little", signed=True
        )

    def test_zero_bytes_are_skipped(self) -> None:
        encoded = int.from_bytes(bytes([0x00, 0x82, 0x00, 0x01]), "little")
        assert list(OrderingKeyList.from_int32(encoded)) == [CORES_ASC, MEMORY_DESC]

    def test_decoding_non_canonical_byte_raises(self) -> None:
        with pytest.raises(InvalidOrderingKeyError):
            OrderingKeyList.from_int32(0x03)

    def test_decoding_duplicate_attribute_raises(self) -> None:
        with pytest.raises(DuplicateOrderingAttributeError):
            OrderingKeyList.from_int32(0x8101)

    @pytest.mark.parametrize("number", [2**31, -(2**31) - 1, 2**40])
    def test_decoding_outside_int32_raises(self, number: int) -> None:
        with pytest.raises(InvalidOrderingKeyError, match="32-bit"):
            OrderingKeyList.from_int32(number)


class TestTextForm:
    """Comma separated text parsing and rendering."""

    def test_example(self) -> None:
        keys = OrderingKeyList.of(MEMORY_ASC, CORES_DESC)

        assert str(keys) == "-Memory,Cores"
        assert OrderingKeyList.parse("-Memory,Cores") == keys

    @pytest.mark.parametrize("keys", _valid_lists())
    def test_round_trip(self, keys: tuple[OrderingKey, ...]) -> None:
        built = OrderingKeyList(keys)
        assert OrderingKeyList.parse(str(built)) == built

    @pytest.mark.parametrize("text", ["", "   ", ",", ",,"])
    def test_empty_text_is_empty_list(self, text: str) -> None:
        parsed = OrderingKeyList.parse(text)
        assert parsed is not None
        assert len(parsed) == 0

    def test_ignores_empty_tokens_and_whitespace(self) -> None:
        parsed = OrderingKeyList.parse(" cores ,, -memory ,")
        assert parsed == [CORES_DESC, MEMORY_ASC]

    @pytest.mark.parametrize(
        "text",
        ["Memory,Memory", "Memory,-Memory", "Disk", "Memory,None", "-", "Memory;Cores"],
    )
    def test_failures_return_none(self, text: str) -> None:
        assert OrderingKeyList.parse(text) is None

    def test_failure_is_logged(self) -> None:
        with capture_logs() as logs:
            OrderingKeyList.parse("Cores,Disk")

        events = [entry["event"] for entry in logs]
        assert "ordering_parse_failed" in events

    def test_repr(self) -> None:
        assert repr(OrderingKeyList.of(CORES_ASC)) == "OrderingKeyList('-Cores')"
