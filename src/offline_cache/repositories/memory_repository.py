"""In-process implementation of CacheStore.

Default backend. Each generation is a plain dict; asyncio runs every
call to completion on one thread, so single-key operations are atomic.
"""

from offline_cache.entities import CacheGeneration, ResponseEntity


class InMemoryCacheRepository:
    """Dictionary-backed store satisfying the CacheStore protocol.

    Entries are copied on the way in and on the way out so that a
    response handed to one caller cannot be changed by another write.
    """

    def __init__(self) -> None:
        self._generations: dict[str, CacheGeneration] = {}
        self._entries: dict[str, dict[str, ResponseEntity]] = {}

    @classmethod
    def create(cls) -> "InMemoryCacheRepository":
        return cls()

    def open(self, generation: str) -> CacheGeneration:
        if generation not in self._generations:
            self._generations[generation] = CacheGeneration(name=generation)
            self._entries[generation] = {}
        return self._generations[generation]

    def get(self, generation: str, key: str) -> ResponseEntity | None:
        entry = self._entries.get(generation, {}).get(key)
        return entry.copy() if entry is not None else None

    def put(self, generation: str, key: str, entry: ResponseEntity) -> None:
        self.open(generation)
        self._entries[generation][key] = entry.for_storage()

    def has_generation(self, generation: str) -> bool:
        return generation in self._generations

    def delete_generation(self, generation: str) -> bool:
        self._entries.pop(generation, None)
        return self._generations.pop(generation, None) is not None

    def list_generations(self) -> list[CacheGeneration]:
        return list(self._generations.values())

    def keys(self, generation: str) -> list[str]:
        return list(self._entries.get(generation, {}))

    def count(self, generation: str) -> int:
        return len(self._entries.get(generation, {}))

    def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        return {
            "backend": "memory",
            "generations": {name: len(entries) for name, entries in self._entries.items()},
            "total_entries": sum(len(entries) for entries in self._entries.values()),
        }
