from __future__ import annotations

from datetime import datetime

from app.services.scheduling.merger import merge_fixed_blocks
from app.services.scheduling.models import FixedBlock


def _block(label: str, start: str, end: str, category: str = "routine") -> FixedBlock:
    return FixedBlock(
        label=label,
        category=category,
        start=datetime.fromisoformat(f"2026-10-19T{start}"),
        end=datetime.fromisoformat(f"2026-10-19T{end}"),
    )


def test_adjacent_slices_with_same_label_merge() -> None:
    merged = merge_fixed_blocks(
        [
            _block("Lecture", "09:30", "10:00"),
            _block("Lecture", "09:00", "09:30"),
            _block("Lecture", "10:01", "10:30"),
        ]
    )

    assert len(merged) == 1
    assert merged[0].start.hour == 9 and merged[0].start.minute == 0
    assert merged[0].end.hour == 10 and merged[0].end.minute == 30


def test_gap_over_one_minute_keeps_blocks_apart() -> None:
    merged = merge_fixed_blocks([_block("Break", "12:00", "12:30", "break"), _block("Break", "12:35", "13:00", "break")])

    assert len(merged) == 2


def test_overlapping_slices_keep_latest_end() -> None:
    merged = merge_fixed_blocks([_block("Shift", "14:00", "16:00"), _block("Shift", "14:30", "15:00")])

    assert [(block.start.hour, block.end.hour) for block in merged] == [(14, 16)]


def test_different_labels_and_days_are_not_merged() -> None:
    tuesday = FixedBlock(
        label="Lecture",
        category="routine",
        start=datetime(2026, 10, 20, 10, 0),
        end=datetime(2026, 10, 20, 10, 30),
    )
    merged = merge_fixed_blocks(
        [tuesday, _block("Lab", "09:30", "10:00"), _block("Lecture", "09:30", "10:00")]
    )

    assert [block.label for block in merged] == ["Lab", "Lecture", "Lecture"]
    assert merged[-1].start.day == 20


def test_input_blocks_are_left_untouched() -> None:
    first = _block("Lecture", "09:00", "09:30")
    merge_fixed_blocks([first, _block("Lecture", "09:30", "10:00")])

    assert first.end == datetime(2026, 10, 19, 9, 30)


def test_empty_input() -> None:
    assert merge_fixed_blocks([]) == []
