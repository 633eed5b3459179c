"""One-time migration of stored or submitted profile payloads into a Profile."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from app.services.scheduling.models import (
    WEEKDAY_KEYS,
    WEEKEND_KEYS,
    Commitment,
    ProcrastinatorType,
    ProductiveTime,
    Profile,
    WorkStyle,
)
from app.services.scheduling.time_ranges import RANGE_PATTERN

logger = logging.getLogger(__name__)

LEGACY_PROCRASTINATOR_TYPES: Dict[str, ProcrastinatorType] = {
    "perfectionist": ProcrastinatorType.PERFECTIONIST,
    "deadline-driven": ProcrastinatorType.DEADLINE_DRIVEN,
    "works better under pressure": ProcrastinatorType.DEADLINE_DRIVEN,
    "dreamer": ProcrastinatorType.LACK_OF_MOTIVATION,
    "lack-of-motivation": ProcrastinatorType.LACK_OF_MOTIVATION,
    "fear-based": ProcrastinatorType.OVERWHELMED,
    "decision-fatigue": ProcrastinatorType.OVERWHELMED,
    "overwhelmed": ProcrastinatorType.OVERWHELMED,
    "distraction": ProcrastinatorType.DISTRACTION,
    "avoidant": ProcrastinatorType.AVOIDANT,
}

WORK_STYLE_LABELS: Dict[str, WorkStyle] = {
    "short, focused bursts": WorkStyle.SHORT_BURSTS,
    "short-bursts": WorkStyle.SHORT_BURSTS,
    "long, deep sessions": WorkStyle.LONG_SESSIONS,
    "long-sessions": WorkStyle.LONG_SESSIONS,
    "a mix of both": WorkStyle.MIXED,
    "mixed": WorkStyle.MIXED,
}

WEEKEND_LINE_PATTERNS = {
    "Saturday": re.compile(r"^(saturday|sat)\b", re.IGNORECASE),
    "Sunday": re.compile(r"^(sunday|sun)\b", re.IGNORECASE),
}

DEPRECATED_FIELDS = ("works_best",)


def normalize_profile(raw: Mapping[str, Any]) -> Profile:
    """
    Convert any stored profile shape into the normalized Profile.

    Accepts both the structured form and older payloads where a weekday held a
    single time-range string, the weekend schedule was free text, and the enum
    answers were stored as their questionnaire labels.
    """
    data = {key: value for key, value in dict(raw).items() if key not in DEPRECATED_FIELDS}
    if len(data) != len(raw):
        logger.info("Dropped deprecated profile fields: %s", [key for key in raw if key in DEPRECATED_FIELDS])

    data["weekly_schedule"] = _normalize_weekly(data.get("weekly_schedule"))
    data["weekend_schedule"] = _normalize_weekend(data.get("weekend_schedule"))
    data["is_procrastinator"] = _yes_no(data.get("is_procrastinator")) is True
    data["has_trouble_finishing"] = _yes_no(data.get("has_trouble_finishing"))
    data["procrastinator_type"] = _procrastinator_type(data.get("procrastinator_type"))
    data["preferred_work_style"] = _lookup(WORK_STYLE_LABELS, data.get("preferred_work_style"))
    data["most_productive_time"] = _productive_time(data.get("most_productive_time"))
    data["break_times"] = (data.get("break_times") or "").strip()
    data["preferred_study_method"] = (data.get("preferred_study_method") or "").strip()
    data["weekly_personal_time"] = _non_negative(data.get("weekly_personal_time"))
    data["weekly_review_hours"] = _non_negative(data.get("weekly_review_hours"))

    known = set(Profile.model_fields) - {"break_ranges"}
    return Profile.model_validate({key: value for key, value in data.items() if key in known})


def parse_weekend_text(text: str) -> Dict[str, List[Commitment]]:
    """Parse lines like ``"Saturday 10:00-12:00 soccer"`` or ``"Sun 09:00-11:00 family"``."""
    result: Dict[str, List[Commitment]] = {day: [] for day in WEEKEND_KEYS}
    for raw_line in re.split(r"\n|;", text or ""):
        line = raw_line.strip()
        if not line:
            continue

        matched_day: Optional[str] = None
        remainder = line
        for day, pattern in WEEKEND_LINE_PATTERNS.items():
            if pattern.match(line):
                matched_day = day
                remainder = pattern.sub("", line, count=1).strip()
                break
        if matched_day is None:
            continue

        time_match = RANGE_PATTERN.search(remainder)
        if not time_match:
            continue
        label = remainder.replace(time_match.group(0), "").strip()
        result[matched_day].append(
            Commitment(name=label or "Weekend activity", time=f"{time_match.group(1)}-{time_match.group(2)}")
        )
    return result


def _normalize_weekly(value: Any) -> Dict[str, List[Commitment]]:
    value = value if isinstance(value, Mapping) else {}
    return {day: _commitments(value.get(day), "Fixed commitment") for day in WEEKDAY_KEYS}


def _normalize_weekend(value: Any) -> Dict[str, List[Commitment]]:
    if isinstance(value, str):
        return parse_weekend_text(value)
    value = value if isinstance(value, Mapping) else {}
    return {day: _commitments(value.get(day), "Weekend activity") for day in WEEKEND_KEYS}


def _commitments(value: Any, default_name: str) -> List[Commitment]:
    if isinstance(value, str):
        return [Commitment(name=default_name, time=value.strip())] if value.strip() else []
    if value is not None and not isinstance(value, (list, tuple)):
        raise ValueError(f"Expected a list of commitments, got {value!r}")
    commitments: List[Commitment] = []
    for entry in value or []:
        if isinstance(entry, Commitment):
            commitments.append(entry)
            continue
        if isinstance(entry, str):
            if entry.strip():
                commitments.append(Commitment(name=default_name, time=entry.strip()))
            continue
        if not isinstance(entry, Mapping):
            raise ValueError(f"Commitment entries must be objects or time-range strings, got {entry!r}")
        time_value = entry.get("time") or ""
        if not isinstance(time_value, str):
            raise ValueError(f"Commitment time must be a string, got {time_value!r}")
        time_text = time_value.strip()
        if not time_text:
            continue
        commitments.append(
            Commitment(
                name=(entry.get("name") or "").strip() or default_name,
                time=time_text,
                description=entry.get("description") or None,
            )
        )
    return commitments


def _yes_no(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text.startswith("yes") or text == "true":
        return True
    if text.startswith("no") or text == "false":
        return False
    return None


def _procrastinator_type(value: Any) -> Optional[ProcrastinatorType]:
    if isinstance(value, ProcrastinatorType):
        return value
    found = _lookup(LEGACY_PROCRASTINATOR_TYPES, value)
    if value and found is None:
        logger.warning("Unknown procrastinator type %r ignored", value)
    return found


def _productive_time(value: Any) -> Optional[ProductiveTime]:
    if isinstance(value, ProductiveTime):
        return value
    for option in ProductiveTime:
        if isinstance(value, str) and option.value.lower() == value.strip().lower():
            return option
    return None


def _lookup(table: Mapping[str, Any], value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, str):
        return value if value in table.values() else None
    return table.get(value.strip().lower())


def _non_negative(value: Any) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return max(number, 0.0)
