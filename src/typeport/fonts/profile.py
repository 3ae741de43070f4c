"""Font profile: the version of a font environment."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FontProfile:
    """Version of the font environment a resolver was built from.

    Attributes:
        version: Profile version tag
        conditions: Cache validity conditions (reserved, always valid)
    """

    version: str = "v1beta"
    conditions: list[dict[str, Any]] = field(default_factory=list)

    def is_valid(self, conditions: list[dict[str, Any]] | None = None) -> bool:
        """Whether metadata cached under ``conditions`` is still valid here.

        Conditions are not evaluated yet, so every cache is accepted.
        """
        return True
