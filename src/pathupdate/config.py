import dataclasses

MAX_BACKFILL = 1_500_000


@dataclasses.dataclass(frozen=True)
class UpdateConfig:
    """
    Knobs for an `Updater`.

    max_backfill: largest number of null elements `$set` may insert to reach
        an index past the end of an array.
    immutable_fields: top-level fields that may be re-set to their current
        value but never changed or removed.
    """

    max_backfill: int = MAX_BACKFILL
    immutable_fields: frozenset[str] = frozenset({"_id"})

    def __post_init__(self):
        if isinstance(self.max_backfill, bool) or not isinstance(self.max_backfill, int):
            raise TypeError("max_backfill must be an int")
        if self.max_backfill < 0:
            raise ValueError("max_backfill must be >= 0")
        object.__setattr__(self, "immutable_fields", frozenset(self.immutable_fields))


DEFAULT_CONFIG = UpdateConfig()
