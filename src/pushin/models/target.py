"""Blockable target model."""

from dataclasses import dataclass
from enum import Enum


class TargetKind(str, Enum):
    """What a target refers to on the device."""

    APP = "app"
    CATEGORY = "category"
    WEBSITE = "website"


@dataclass(frozen=True)
class BlockTarget:
    """An entry in the blocking catalog.

    The platform_agnostic_identifier is an opaque key (for example a
    reverse-domain app identifier) that platform adapters map to their
    own blocking primitives.
    """

    platform_agnostic_identifier: str
    name: str = ""
    kind: TargetKind = TargetKind.APP

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "platform_agnostic_identifier": self.platform_agnostic_identifier,
            "name": self.name,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BlockTarget":
        """Create from dictionary."""
        return cls(
            platform_agnostic_identifier=data["platform_agnostic_identifier"],
            name=data.get("name", ""),
            kind=TargetKind(data.get("kind", "app")),
        )

    def get_display(self) -> str:
        """Get a display label, falling back to the identifier."""
        return self.name or self.platform_agnostic_identifier
