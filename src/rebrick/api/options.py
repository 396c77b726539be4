"""
Query Options
=============
Typed query parameters for the endpoint methods.

Every field defaults to ``None`` and is left out of the request. Endpoint
methods also accept a plain mapping, which is passed through verbatim.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Union


@dataclass(frozen=True)
class QueryOptions:
    """Base class: turns the set fields into a query mapping."""

    def to_query(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class OrderingOptions(QueryOptions):
    ordering: Optional[str] = None


@dataclass(frozen=True)
class PageOptions(QueryOptions):
    page: Optional[int] = None
    page_size: Optional[int] = None
    ordering: Optional[str] = None


@dataclass(frozen=True)
class MinifigSearch(PageOptions):
    min_parts: Optional[int] = None
    max_parts: Optional[int] = None
    in_set_num: Optional[str] = None
    in_theme_id: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class PartSearch(PageOptions):
    part_num: Optional[str] = None
    part_nums: Optional[str] = None
    part_cat_id: Optional[str] = None
    color_id: Optional[str] = None
    bricklink_id: Optional[str] = None
    brickowl_id: Optional[str] = None
    lego_id: Optional[str] = None
    ldraw_id: Optional[str] = None
    search: Optional[str] = None
    inc_part_details: Optional[int] = None


@dataclass(frozen=True)
class SetSearch(PageOptions):
    theme_id: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    min_parts: Optional[int] = None
    max_parts: Optional[int] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class UserPartSearch(PageOptions):
    part_num: Optional[str] = None
    part_cat_id: Optional[str] = None
    color_id: Optional[str] = None
    inc_part_details: Optional[int] = None


@dataclass(frozen=True)
class UserSetSearch(PageOptions):
    set_num: Optional[str] = None
    theme_id: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    min_parts: Optional[int] = None
    max_parts: Optional[int] = None
    search: Optional[str] = None


Config = Union[QueryOptions, Mapping[str, Any], None]


def as_query(config: Config) -> Dict[str, Any]:
    """Normalize an options object, a mapping or ``None`` into a query dict"""
    if config is None:
        return {}
    if isinstance(config, QueryOptions):
        return config.to_query()
    if isinstance(config, Mapping):
        return dict(config)
    raise TypeError(f"Unsupported query options: {type(config).__name__}")
