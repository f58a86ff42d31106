"""Configuration helpers for squad report attributes."""

from .attributes import (
    ATTRIBUTE_CODES,
    ATTRIBUTE_VALUE_MAX,
    ATTRIBUTE_VALUE_MIN,
    AttributeCode,
    attribute_category,
    get_attribute,
    get_attribute_by_name,
    iter_attributes,
    resolve_header,
)

__all__ = [
    "ATTRIBUTE_CODES",
    "ATTRIBUTE_VALUE_MAX",
    "ATTRIBUTE_VALUE_MIN",
    "AttributeCode",
    "attribute_category",
    "get_attribute",
    "get_attribute_by_name",
    "iter_attributes",
    "resolve_header",
]
