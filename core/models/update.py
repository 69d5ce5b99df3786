"""Update server data models."""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class UpdateScope:
    """Filter describing which updates to retrieve from the update server."""
    approved_only: bool = True
    target_group_ids: Tuple[str, ...] = ()

    @property
    def is_group_restricted(self) -> bool:
        """Check if the scope is limited to specific target groups."""
        return bool(self.target_group_ids)


@dataclass(frozen=True)
class TargetGroup:
    """Computer target group defined on the update server."""
    id: str
    name: str


@dataclass(frozen=True)
class InstallableFileRef:
    """File reference attached to an update's installable items."""
    uri: str
    name: str = ""


@dataclass
class UpdateRecord:
    """Update as returned by the update server."""

    update_id: str
    title: str
    files: List[InstallableFileRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "UpdateRecord":
        """Build a record from the JSON emitted by the server bridge."""
        files = [
            InstallableFileRef(uri=f.get("Uri", ""), name=f.get("Name") or "")
            for f in data.get("Files") or []
            if f.get("Uri")
        ]
        return cls(
            update_id=data.get("Id", ""),
            title=data.get("Title", ""),
            files=files,
        )


@dataclass(frozen=True)
class InstallableFile:
    """Package resolved to a local path."""
    path: str
    title: str
