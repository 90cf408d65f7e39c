from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Union

from .errors import UnexpectedTransformError
from .ranking import best_value, position_of, ranked_items
from .record import (
    CHECKPOINTS,
    PACE_DISTANCE,
    RACE_DISTANCE,
    CalculatedRecord,
    RawSplitRecord,
    unique_race_ids,
)
from .timecodec import ZERO_TIME, format_diff, format_time

RANK_PLACEHOLDER = ""
SPLIT4_PLACEHOLDER = ""


@dataclass
class TimingRow:
    name: str
    bib: str
    club: str
    cat: str
    wave_name: str
    age: str
    gender: str
    custom: str
    handicap: str
    start: str
    split_1000m: str
    split2: str
    split3: str
    split4: str
    finish: str
    result: str
    penalty: str
    penalty_note: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "Name": self.name,
            "Bib": self.bib,
            "Club": self.club,
            "Cat": self.cat,
            "WaveName": self.wave_name,
            "Age": self.age,
            "Gender": self.gender,
            "Custom": self.custom,
            "Handicap": self.handicap,
            "Start": self.start,
            "1000m": self.split_1000m,
            "Split2": self.split2,
            "Split3": self.split3,
            "Split4": self.split4,
            "Finish": self.finish,
            "Result": self.result,
            "Penalty": self.penalty,
            "PenaltyNote": self.penalty_note,
        }


@dataclass
class WaveHeader:
    wave_name: str

    def to_dict(self) -> Dict[str, str]:
        return {"WaveHeader": self.wave_name}


@dataclass
class LeaderboardRow:
    name: str
    bib: str
    club: str
    cat: str
    age: str
    gender: str
    lane: str
    handicap: str
    split: str
    split_diff: str
    split_rank: int
    second_half: str
    second_half_diff: str
    second_half_rank: int
    result: str
    result_diff: str
    result_rank: int
    pace: str
    pace_unit: str
    rank: str = RANK_PLACEHOLDER

    def to_dict(self) -> Dict[str, str]:
        return {
            "Rank": self.rank,
            "Name": self.name,
            "Bib": self.bib,
            "Club": self.club,
            "Cat": self.cat,
            "Age": self.age,
            "Gender": self.gender,
            "Lane": self.lane,
            "Handicap": self.handicap,
            "1000m": self.split,
            "1000mDiff": self.split_diff,
            "1000mRank": f"({self.split_rank})",
            "2000m": self.second_half,
            "2000mDiff": self.second_half_diff,
            "2000mRank": f"({self.second_half_rank})",
            "Result": self.result,
            "ResultDiff": self.result_diff,
            "ResultRank": f"({self.result_rank})",
            "Pace": self.pace,
            "PaceUnit": self.pace_unit,
        }


ResultsEntry = Union[WaveHeader, LeaderboardRow]


@dataclass
class TransformResults:
    timing_rows: List[TimingRow] = field(default_factory=list)
    results_rows: List[ResultsEntry] = field(default_factory=list)

    def as_json(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "timing": [row.to_dict() for row in self.timing_rows],
            "results": [row.to_dict() for row in self.results_rows],
        }


def _by_race_id(item: CalculatedRecord) -> str:
    return item.race_id


class ResultTransformer:
    def __init__(
        self,
        records: Iterable[RawSplitRecord] | None = None,
        race_distance: float = RACE_DISTANCE,
        pace_distance: float = PACE_DISTANCE,
    ) -> None:
        self.records: List[RawSplitRecord] = unique_race_ids(records or [])
        self.race_distance = race_distance
        self.pace_distance = pace_distance

    @property
    def pace_unit(self) -> str:
        return f"/{int(self.pace_distance)}m"

    def transform(self) -> TransformResults:
        if not self.records:
            return TransformResults()

        timing_rows = [self._timing_row(record) for record in self.records]

        results_rows: List[ResultsEntry] = []
        for wave_name, members in self.waves().items():
            results_rows.append(WaveHeader(wave_name=wave_name))
            results_rows.extend(self._wave_rows(members))

        return TransformResults(timing_rows=timing_rows, results_rows=results_rows)

    def as_json(self) -> Dict[str, List[Dict[str, Any]]]:
        return self.transform().as_json()

    def waves(self) -> Dict[str, List[RawSplitRecord]]:
        """Records grouped by wave name, waves in first-seen order."""
        groups: Dict[str, List[RawSplitRecord]] = {}
        for record in self.records:
            groups.setdefault(record.wave_name, []).append(record)
        return groups

    def _wave_rows(self, members: Sequence[RawSplitRecord]) -> List[LeaderboardRow]:
        calculated = [CalculatedRecord(record=record) for record in members]
        for item in calculated:
            item.calculate(self.race_distance, self.pace_distance)

        def split_key(item: CalculatedRecord) -> float:
            return item.checkpoint_seconds

        def second_half_key(item: CalculatedRecord) -> float:
            return item.finish_seconds

        def result_key(item: CalculatedRecord) -> float:
            return item.result_seconds

        by_split = ranked_items(calculated, split_key)
        by_second_half = ranked_items(calculated, second_half_key)
        by_result = ranked_items(calculated, result_key)

        best_split = best_value(by_split, split_key)
        best_second_half = best_value(by_second_half, second_half_key)
        best_result = best_value(by_result, result_key)

        rows: List[LeaderboardRow] = []
        for item in calculated:
            record = item.record
            split_rank = position_of(item, by_split, _by_race_id)
            second_half_rank = position_of(item, by_second_half, _by_race_id)
            result_rank = position_of(item, by_result, _by_race_id)

            result_text = record.result if record.in_progress else format_time(item.result_seconds)

            rows.append(
                LeaderboardRow(
                    name=record.name,
                    bib=record.bib,
                    club=record.club,
                    cat=record.cat,
                    age=record.age,
                    gender=record.gender,
                    lane=record.custom,
                    handicap=record.handicap,
                    split=format_time(item.checkpoint_seconds),
                    split_diff=format_diff(self._delta(item.checkpoint_seconds, best_split, split_rank)),
                    split_rank=split_rank,
                    second_half=format_time(item.finish_seconds),
                    second_half_diff=format_diff(
                        self._delta(item.finish_seconds, best_second_half, second_half_rank)
                    ),
                    second_half_rank=second_half_rank,
                    result=result_text,
                    result_diff=format_diff(self._delta(item.result_seconds, best_result, result_rank)),
                    result_rank=result_rank,
                    pace=format_time(item.pace),
                    pace_unit=self.pace_unit,
                )
            )
        return rows

    @staticmethod
    def _delta(value: float, best: float, place: int) -> float:
        """Gap to the wave leader; 0 for the leader and for unrecorded values."""
        if place == 1 or not value:
            return 0.0
        return value - best

    @staticmethod
    def _timing_row(record: RawSplitRecord) -> TimingRow:
        columns = {name: _clock_text(*record.checkpoint(name)) for name in CHECKPOINTS}
        return TimingRow(
            name=record.name,
            bib=record.bib,
            club=record.club,
            cat=record.cat,
            wave_name=record.wave_name,
            age=record.age,
            gender=record.gender,
            custom=record.custom,
            handicap=record.handicap,
            start=columns["Start"],
            split_1000m=columns["Split1"],
            split2=columns["Split2"],
            split3=columns["Split3"],
            split4=SPLIT4_PLACEHOLDER,
            finish=columns["Finish"],
            result=record.result,
            penalty=record.penalty,
            penalty_note=record.penalty_note,
        )


def _clock_text(time_string: str, decile_string: str) -> str:
    """Provider clock time with its tenths digit, blank when unrecorded."""
    if not time_string or time_string == ZERO_TIME:
        return ""
    if not decile_string:
        return time_string
    return f"{time_string}.{decile_string}"


def build_views(records: Iterable[RawSplitRecord], **kwargs: Any) -> Dict[str, List[Dict[str, Any]]]:
    """Both output views for ``records``; unexpected failures are wrapped."""
    try:
        return ResultTransformer(records, **kwargs).as_json()
    except Exception as exc:
        raise UnexpectedTransformError(f"failed to build results views: {exc}") from exc
