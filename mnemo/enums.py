from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)


def enum_to_list(enum_cls: type[E]) -> list[E]:
    # definition order, aliases excluded
    return list(enum_cls)
