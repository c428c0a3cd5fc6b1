"""Helpers to build Contact Manager exports for tests."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Sequence

CHANNEL_COLUMN_COUNT = 42
CONTACT_COLUMN_COUNT = 9


def cm_channel(
    name: str,
    *,
    mode: str = "DMR",
    bandwidth: str = "12.5",
    tx_freq: str = "433.400000",
    rx_freq: str = "433.400000",
    power: str = "HIGH",
    ctcss_rx: str = "NONE",
    ctcss_tx: str = "NONE",
    group_id: str = "",
    colour: str = "1",
    slot: str = "2",
) -> List[str]:
    row = ["NO"] * CHANNEL_COLUMN_COUNT
    row[0] = name
    row[1] = mode
    row[2] = bandwidth
    row[3] = tx_freq
    row[4] = rx_freq
    row[12] = power
    row[18] = ctcss_rx
    row[19] = ctcss_tx
    row[36] = group_id
    row[38] = colour
    row[41] = slot
    return row


def cm_contact(dmr_id: str, call_name: str, call_type: str = "Private Call", alert: str = "No") -> List[str]:
    return [dmr_id, call_name, call_type, alert] + [""] * (CONTACT_COLUMN_COUNT - 4)


def write_export(path: Path, rows: Iterable[Sequence[str]], columns: int) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow([f"Column {i}" for i in range(columns)])
        for row in rows:
            writer.writerow(row)


def write_channels_export(path: Path, rows: Iterable[Sequence[str]]) -> None:
    write_export(path, rows, CHANNEL_COLUMN_COUNT)


def write_contacts_export(path: Path, rows: Iterable[Sequence[str]]) -> None:
    write_export(path, rows, CONTACT_COLUMN_COUNT)


def read_output(path: Path) -> List[List[str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.reader(handle))
