"""Per-partition consumption cursors for resumable round-robin scanning."""


class PartitionCursorSet:
    """Track how many summaries of each partition have been consumed.

    Counts start at 0, are created on first touch and never decrease. Once a
    partition's size is known, counts are clamped to it.
    """

    def __init__(self) -> None:
        self._consumed: dict[str, int] = {}
        self._sizes: dict[str, int] = {}

    def consumed_count(self, partition_id: str) -> int:
        return self._consumed.get(partition_id, 0)

    def record_size(self, partition_id: str, size: int) -> None:
        """Remember the latest known membership size of a partition."""
        if size < 0:
            raise ValueError("size cannot be negative")
        self._sizes[partition_id] = size

    def advance(self, partition_id: str, by: int) -> int:
        """
        Move a partition's cursor forward.

        Args:
            partition_id: Partition to advance
            by: Number of summaries consumed

        Returns:
            The new consumed count

        Raises:
            ValueError: If ``by`` is negative
        """
        if by < 0:
            raise ValueError("cursors cannot move backwards")

        current = self.consumed_count(partition_id)
        target = current + by
        size = self._sizes.get(partition_id)
        if size is not None:
            target = min(target, size)
        self._consumed[partition_id] = max(current, target)
        return self._consumed[partition_id]

    def snapshot(self) -> dict[str, int]:
        return dict(self._consumed)

    def reset(self) -> None:
        self._consumed.clear()
        self._sizes.clear()

    def __len__(self) -> int:
        return len(self._consumed)
