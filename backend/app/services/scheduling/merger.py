"""Coalesce per-slot fixed blocks into display blocks."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from app.services.scheduling.models import FixedBlock

MERGE_GAP = timedelta(minutes=1)


def merge_fixed_blocks(blocks: Iterable[FixedBlock]) -> List[FixedBlock]:
    """
    Merge blocks sharing ``(date, label, category)`` whose gap is at most one minute.

    Groups are merged independently, so two differently labelled commitments that
    overlap in time stay separate blocks.
    """
    groups: Dict[Tuple[date, str, str], List[FixedBlock]] = {}
    for block in blocks:
        groups.setdefault((block.start.date(), block.label, block.category), []).append(block)

    merged: List[FixedBlock] = []
    for group in groups.values():
        group.sort(key=lambda block: block.start)
        current = group[0].model_copy()
        for block in group[1:]:
            if block.start - current.end <= MERGE_GAP:
                current.end = max(current.end, block.end)
            else:
                merged.append(current)
                current = block.model_copy()
        merged.append(current)

    merged.sort(key=lambda block: block.start)
    return merged
