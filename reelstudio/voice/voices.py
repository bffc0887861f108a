"""Speaker models returned by the voice API.

Responsibilities:
- Represent stock speaker identities exposed to the studio.
- Decouple the web layer from the provider's bare-name speaker listing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Speaker:
    """Stock speaker available for synthesis.

    Attributes:
        id: Provider-native speaker identifier (the speaker name).
        name: Human-readable speaker name.
        language: Short language code; the provider does not report one.
        gender: Speaker gender when known.
    """

    id: str
    name: str
    language: str = "en"
    gender: str | None = None

    @classmethod
    def from_name(cls, name: str) -> Speaker:
        return cls(id=name, name=name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "language": self.language,
            "gender": self.gender,
        }
