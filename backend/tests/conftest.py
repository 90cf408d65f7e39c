from __future__ import annotations

from typing import Any, Dict

import pytest


def provider_row(
    race_id: str,
    name: str,
    wave: str,
    start: str = "",
    split1: str = "",
    finish: str = "",
    result: str = "",
    result_secs: Any = 0,
    **extra: Any,
) -> Dict[str, Any]:
    """A provider JSON object with deciles of 0 on every recorded checkpoint."""

    row: Dict[str, Any] = {
        "RaceId": race_id,
        "Name": name,
        "Bib": race_id,
        "Club": "Tideway RC",
        "Cat": "MasC",
        "WaveName": wave,
        "Age": "41",
        "Gender": "M",
        "Custom": "3",
        "Handicap": "",
        "StartTime": start,
        "StartDecile": "0" if start else "",
        "Split1Time": split1,
        "Split1Decile": "0" if split1 else "",
        "Split2Time": "",
        "Split2Decile": "",
        "Split3Time": "",
        "Split3Decile": "",
        "FinishTime": finish,
        "FinishDecile": "0" if finish else "",
        "Result": result,
        "ResultSecs": result_secs,
        "Penalty": "",
        "PenaltyNote": "",
    }
    row.update(extra)
    return row


@pytest.fixture
def provider_rows() -> list[Dict[str, Any]]:
    return [
        provider_row("r1", "Alice", "Wave 1", "10:00:00", "10:03:30", "10:07:10", "7:10.0", 430),
        provider_row("r2", "Bea", "Wave 1", "10:00:00", "10:03:20", "10:07:20", "7:20.0", 440),
        provider_row("r3", "Cat", "Wave 2", "10:30:00", "10:33:40", "", "In Progress", 0),
        provider_row("r4", "Dee", "Wave 1", "10:00:00", "", "", "In Progress", 999),
        provider_row("r5", "Eve", "Wave 2", "10:30:00", "10:33:40", "10:37:00", "7:00.0", 420),
    ]
