from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Tuple

from .duration import duration
from .timecodec import lenient_number, parse_time

IN_PROGRESS = "In Progress"

# Provider checkpoint prefixes, in course order.
CHECKPOINTS = ("Start", "Split1", "Split2", "Split3", "Finish")

# Physical course length; the provider does not report it.
RACE_DISTANCE = 2000
PACE_DISTANCE = 500


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class RawSplitRecord:
    """One athlete's timing data as delivered by the provider.

    ``checkpoints`` holds a ``(time_of_day, decile)`` pair per entry in
    :data:`CHECKPOINTS`. ``race_id`` is unique within a feed.
    """

    race_id: str
    name: str
    bib: str = ""
    club: str = ""
    cat: str = ""
    wave_name: str = ""
    age: str = ""
    gender: str = ""
    custom: str = ""  # Lane
    handicap: str = ""
    checkpoints: Tuple[Tuple[str, str], ...] = ()
    result: str = ""
    result_seconds: float = 0.0
    penalty: str = ""
    penalty_note: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], fallback_id: str = "") -> "RawSplitRecord":
        """Factory for the provider's JSON objects; missing keys become blanks."""

        checkpoints = tuple(
            (_text(payload.get(f"{name}Time")), _text(payload.get(f"{name}Decile")))
            for name in CHECKPOINTS
        )
        race_id = _text(payload.get("RaceId")) or fallback_id or _text(payload.get("Bib"))

        return cls(
            race_id=race_id,
            name=_text(payload.get("Name")),
            bib=_text(payload.get("Bib")),
            club=_text(payload.get("Club")),
            cat=_text(payload.get("Cat")),
            wave_name=_text(payload.get("WaveName")),
            age=_text(payload.get("Age")),
            gender=_text(payload.get("Gender")),
            custom=_text(payload.get("Custom")),
            handicap=_text(payload.get("Handicap")),
            checkpoints=checkpoints,
            result=_text(payload.get("Result")),
            result_seconds=lenient_number(payload.get("ResultSecs")),
            penalty=_text(payload.get("Penalty")),
            penalty_note=_text(payload.get("PenaltyNote")),
        )

    def checkpoint(self, name: str) -> Tuple[str, str]:
        try:
            return self.checkpoints[CHECKPOINTS.index(name)]
        except (ValueError, IndexError):
            return ("", "")

    def checkpoint_seconds(self, name: str) -> float:
        return parse_time(*self.checkpoint(name))

    @property
    def in_progress(self) -> bool:
        return self.result == IN_PROGRESS


def unique_race_ids(records: Iterable[RawSplitRecord]) -> List[RawSplitRecord]:
    """Records with repeated race ids given a positional suffix.

    Rank lookups match on race_id, so it must be unique within a feed.
    """

    unique: List[RawSplitRecord] = []
    seen: set[str] = set()
    for idx, record in enumerate(records):
        if record.race_id in seen:
            record = replace(record, race_id=f"{record.race_id}#{idx}")
        seen.add(record.race_id)
        unique.append(record)
    return unique


def records_from_payload(rows: Iterable[Dict[str, Any]]) -> List[RawSplitRecord]:
    """Build records from provider rows, giving id-less rows a positional id."""

    return unique_race_ids(
        RawSplitRecord.from_payload(row, fallback_id=f"row-{idx}") for idx, row in enumerate(rows)
    )


@dataclass
class CalculatedRecord:
    """A raw record plus the derived numbers the leaderboard ranks on.

    A value of 0 means "not recorded"; a genuinely zero elapsed time cannot
    be told apart from a missing one.
    """

    record: RawSplitRecord

    # Calculated fields
    checkpoint_seconds: float = 0.0  # Start -> Split1
    finish_seconds: float = 0.0  # Split1 -> Finish
    result_seconds: float = 0.0
    pace: float = 0.0

    def calculate(self, race_distance: float = RACE_DISTANCE, pace_distance: float = PACE_DISTANCE) -> None:
        """Recalculate split durations, result time and pace."""

        start = self.record.checkpoint_seconds("Start")
        split = self.record.checkpoint_seconds("Split1")
        finish = self.record.checkpoint_seconds("Finish")

        self.checkpoint_seconds = duration(start, split)
        self.finish_seconds = duration(split, finish)
        self.result_seconds = lenient_number(self.record.result_seconds)

        if self.result_seconds <= 0 or not race_distance:
            self.pace = 0.0
        else:
            self.pace = self.result_seconds / race_distance * pace_distance

    @property
    def race_id(self) -> str:
        return self.record.race_id
