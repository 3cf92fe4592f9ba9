"""Cache generation domain entity."""

import re
import time
from dataclasses import dataclass, field

from offline_cache.errors import InvalidGenerationName

_SEMVER = r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)(?:-(?P<pre>[0-9A-Za-z.-]+))?"
_NAME_RE = re.compile(rf"^(?P<app_id>.+)-v{_SEMVER}$")


def generation_name(app_id: str, version: str) -> str:
    """Build ``<app-id>-v<semver>`` and validate it."""
    name = f"{app_id}-v{version}"
    if not _NAME_RE.match(name):
        raise InvalidGenerationName(f"invalid generation name {name!r}: version must be semver")
    return name


def generation_prefix(app_id: str) -> str:
    """Prefix shared by every generation of ``app_id``."""
    return f"{app_id}-"


@dataclass(frozen=True)
class CacheGeneration:
    """A named, versioned snapshot of the cache namespace.

    Attributes:
        name: ``<app-id>-v<semver>``; names that do not parse are still
            listed by stores but have no version
        created_at: Unix timestamp of when the generation was opened
    """

    name: str
    created_at: float = field(default_factory=time.time)

    @property
    def app_id(self) -> str | None:
        match = _NAME_RE.match(self.name)
        return match.group("app_id") if match else None

    @property
    def version(self) -> str | None:
        match = _NAME_RE.match(self.name)
        if not match:
            return None
        return self.name[len(match.group("app_id")) + 2 :]

    @property
    def version_key(self) -> tuple:
        """Sort key ordering generations by semantic version.

        A pre-release sorts before its release; unparseable names sort first.
        """
        match = _NAME_RE.match(self.name)
        if not match:
            return (-1, -1, -1, 0, "")
        pre = match.group("pre")
        return (
            int(match.group("major")),
            int(match.group("minor")),
            int(match.group("patch")),
            0 if pre else 1,
            pre or "",
        )

    def belongs_to(self, app_id: str) -> bool:
        """True if the name parses and its app id is exactly ``app_id``."""
        return self.app_id == app_id
