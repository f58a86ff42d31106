import dataclasses

import pytest

from fmsquad.config import (
    ATTRIBUTE_CODES,
    attribute_category,
    get_attribute,
    get_attribute_by_name,
    iter_attributes,
    resolve_header,
)


def test_attribute_table_follows_export_column_order():
    codes = [attr.code for attr in iter_attributes()]
    assert len(codes) == 47
    assert codes[:4] == ["Acc", "Wor", "Vis", "Thr"]
    assert codes[-1] == "Aer"
    assert len(set(codes)) == len(codes)
    assert len({attr.name for attr in ATTRIBUTE_CODES}) == len(codes)


def test_every_attribute_has_a_category():
    assert all(attr.category != "other" for attr in ATTRIBUTE_CODES)
    assert get_attribute("Acc").category == "physical"
    assert get_attribute("TRO").category == "goalkeeper"


def test_get_attribute_by_code():
    attr = get_attribute("L Th")
    assert attr.name == "Long Throws"
    assert attr.category == "technical"


def test_get_attribute_missing_raises():
    with pytest.raises(KeyError):
        get_attribute("Xyz")


def test_get_attribute_by_name_is_case_insensitive():
    attr = get_attribute_by_name("work rate")
    assert attr is not None
    assert attr.code == "Wor"
    assert get_attribute_by_name("Shoe Size") is None


def test_attribute_category_unknown_is_other():
    assert attribute_category("Finishing") == "technical"
    assert attribute_category("Determination") == "mental"
    assert attribute_category("Height") == "other"


def test_resolve_header_maps_codes_only():
    assert resolve_header(" Tck ") == "Tackling"
    assert resolve_header("Name") == "Name"


def test_attribute_codes_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        ATTRIBUTE_CODES[0].name = "Speed"  # type: ignore[misc]
