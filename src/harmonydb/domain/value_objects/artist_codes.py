"""IPI and ISNI identifier value objects attached to artists."""

import re
from dataclasses import dataclass

# IPI name numbers are 11 digits; ISNIs are 15 digits plus a digit or X check character.
IPI_PATTERN = re.compile(r"^\d{11}$")
ISNI_PATTERN = re.compile(r"^\d{15}[\dX]$")


@dataclass(frozen=True)
class IpiCode:
    """Interested Party Information code."""

    ipi: str

    def __post_init__(self) -> None:
        if not IPI_PATTERN.match(self.ipi):
            raise ValueError(f"Invalid IPI code: {self.ipi!r}")

    def to_json(self) -> dict[str, str]:
        return {"ipi": self.ipi}


@dataclass(frozen=True)
class IsniCode:
    """International Standard Name Identifier."""

    isni: str

    def __post_init__(self) -> None:
        if not ISNI_PATTERN.match(self.isni):
            raise ValueError(f"Invalid ISNI code: {self.isni!r}")

    def to_json(self) -> dict[str, str]:
        return {"isni": self.isni}
