"""Vehicle class for rentable fleet units."""

from typing import Optional


class Vehicle:
    """One physical rentable car."""

    def __init__(
        self,
        id: str,
        make: str,
        model: str,
        year: Optional[int] = None,
        plate: Optional[str] = None,
    ):
        self.id = id
        self.make = make
        self.model = model
        self.year = year
        self.plate = plate

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = f"{self.make} {self.model}"
        return f"{self.year} {base}" if self.year else base

    def matches(self, text: Optional[str]) -> bool:
        """Case-insensitive substring match on the display name."""
        if not text or not text.strip():
            return True
        return text.strip().lower() in self.name.lower()
