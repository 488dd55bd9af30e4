from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class ParsedKey(BaseModel):
    """A caller key split into the row identifier and an optional sub-path."""

    model_config = ConfigDict(frozen=True)

    id: str
    path: Optional[str] = None

    @property
    def segments(self) -> List[str]:
        """Property names of the sub-path, outermost first."""
        if self.path is None:
            return []
        return self.path.split(".")


class Entry(BaseModel):
    """One row of a collection with its decoded document."""

    id: str
    data: Any = None
