from dataclasses import dataclass

from offline_cache.config import Settings
from offline_cache.entities import RequestEntity, generation_name


@dataclass(frozen=True)
class WorkerConfig:
    """Per-instance configuration injected into a LifecycleController.

    Attributes:
        app_id: Application id; also the generation name prefix
        version: Semantic version of this deploy
        origin: The application's own origin (scheme://host[:port])
        resources: Paths stored into the generation at install time
        offline_path: Path of the offline substitute; must be in ``resources``
        dynamic_prefixes: Path prefixes treated as dynamic
        skip_waiting: Promote right after install instead of waiting
    """

    app_id: str
    version: str
    origin: str
    resources: tuple[str, ...]
    offline_path: str = "/offline.html"
    dynamic_prefixes: tuple[str, ...] = ("/api/",)
    skip_waiting: bool = False

    def __post_init__(self) -> None:
        # Validates the version as a side effect.
        generation_name(self.app_id, self.version)
        if self.offline_path not in self.resources:
            raise ValueError(f"offline path {self.offline_path!r} is not in the resource list")

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkerConfig":
        return cls(
            app_id=settings.app_id,
            version=settings.app_version,
            origin=settings.origin_url,
            resources=tuple(settings.precache_urls),
            offline_path=settings.offline_path,
            dynamic_prefixes=tuple(settings.dynamic_prefixes),
            skip_waiting=settings.skip_waiting,
        )

    @property
    def generation_name(self) -> str:
        return generation_name(self.app_id, self.version)

    @property
    def offline_key(self) -> str:
        return RequestEntity.for_path(self.origin, self.offline_path).cache_key
