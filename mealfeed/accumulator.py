"""Order-preserving deduplicating merge of detail records."""

from collections.abc import Iterable, Sequence
from dataclasses import replace

from .models import DetailRecord


def merge(existing: Sequence[DetailRecord], incoming: Iterable[DetailRecord]) -> list[DetailRecord]:
    """
    Append records whose ``item_id`` has not been seen yet.

    Appended records get ``sequence_index`` set to their position in the
    result. Neither argument is modified, and merging the same batch twice
    adds nothing the second time.

    Args:
        existing: Current feed contents, already unique by id
        incoming: New batch, possibly overlapping ``existing`` or itself

    Returns:
        A new list with ``existing`` first, then unseen incoming records
    """
    merged = list(existing)
    seen = {record.item_id for record in merged}

    for record in incoming:
        if record.item_id in seen:
            continue
        seen.add(record.item_id)
        merged.append(replace(record, sequence_index=len(merged)))

    return merged
