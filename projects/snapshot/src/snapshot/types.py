"""Type definitions for snapshot capture."""

from enum import StrEnum, auto
from typing import Any, NotRequired, TypedDict


class DataType(StrEnum):
    """Origin of the rows of a snapshot."""

    TABLE = auto()
    REQUEST = auto()


class TableSource(TypedDict):
    """A table to capture."""

    name: str
    primary_keys: NotRequired[list[str]]
    columns: NotRequired[list[str]]
    exclude: NotRequired[list[str]]
    order_by: NotRequired[list[str]]


class RequestSource(TypedDict):
    """An arbitrary SQL request to capture."""

    label: str
    sql: str
    parameters: NotRequired[dict[str, Any]]
    primary_keys: NotRequired[list[str]]


type Source = TableSource | RequestSource
