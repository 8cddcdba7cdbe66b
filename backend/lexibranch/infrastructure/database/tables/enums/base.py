from enum import Enum


class BaseTableActionEnum(str, Enum):
    """Action names written to the table-level debug log."""
