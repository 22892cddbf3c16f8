"""
Location policy for backend-supplied paths.

By default the gateway opens whatever location the backend returns. When a
location root is configured, locations are resolved and must stay inside it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import LocationRejected
from .settings import Settings

__all__ = ["LocationPolicy"]


class LocationPolicy:
    """
    Confine backend locations to a root directory.

    Resolution follows symlinks, so a link inside the root that points
    outside it is rejected as well.

    Examples:
        >>> LocationPolicy("/data").check("/data/blobs/abc")
        '/data/blobs/abc'

        >>> LocationPolicy("/data").check("/data/../etc/passwd")
        LocationRejected: location outside /data: /data/../etc/passwd
    """

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    @classmethod
    def from_settings(cls, settings: Optional[Settings]) -> Optional[LocationPolicy]:
        """Policy for ``settings.location_root``, or None when locations are trusted."""
        if settings is None or settings.location_root is None:
            return None
        return cls(settings.location_root)

    def check(self, location: str) -> str:
        """
        Validate a location against the root.

        Returns:
            The location, unchanged

        Raises:
            LocationRejected: If the location is empty, unresolvable, or outside the root
        """
        if not location:
            raise LocationRejected("empty location from backend", location=location)
        try:
            resolved = Path(location).resolve()
        except (OSError, ValueError) as e:
            raise LocationRejected(f"unresolvable location: {location!r}", location=location) from e
        if resolved != self.root and self.root not in resolved.parents:
            raise LocationRejected(f"location outside {self.root}: {location}", location=location)
        return location
