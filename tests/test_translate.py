from __future__ import annotations

from pathlib import Path

import pytest

from tests.utils import cm_channel, cm_contact, read_output, write_channels_export, write_contacts_export
from translate import (
    CHANNELS_HEADER,
    CONTACTS_HEADER,
    CmContact,
    RecordError,
    channel_records,
    read_channels,
    read_contacts,
    split_call_name,
    write_channels,
    write_contacts,
    write_talkgroups,
    write_zones,
)
from zoning import ChannelRecord, ContactTable, ZoneRow


def test_read_channels_picks_columns_by_position(tmp_path: Path) -> None:
    path = tmp_path / "channels.csv"
    write_channels_export(path, [
        cm_channel("433.400 FMN", mode="FM", bandwidth="25", tx_freq="433.400000", rx_freq="432.000000",
                   power="LOW", ctcss_rx="88.5", group_id="", colour="3", slot="1"),
        cm_channel("TG242 Norge", group_id="242 Norge"),
    ])

    channels = read_channels(str(path))

    assert len(channels) == 2
    first = channels[0]
    assert first.name == "433.400 FMN"
    assert first.mode == "FM"
    assert first.bandwidth == 25.0
    assert first.tx_freq == 433.4
    assert first.rx_freq == 432.0
    assert first.power == "LOW"
    assert first.ctcss_rx == "88.5"
    assert first.colour == 3
    assert first.slot == 1
    assert channel_records(channels) == [ChannelRecord("433.400 FMN", ""), ChannelRecord("TG242 Norge", "242 Norge")]


def test_read_channels_reports_short_rows(tmp_path: Path) -> None:
    path = tmp_path / "channels.csv"
    write_channels_export(path, [cm_channel("OK"), ["Too", "short"]])

    with pytest.raises(RecordError) as excinfo:
        read_channels(str(path))

    assert excinfo.value.line == 3


def test_read_channels_reports_extra_columns(tmp_path: Path) -> None:
    path = tmp_path / "channels.csv"
    write_channels_export(path, [cm_channel("Long") + ["extra"]])

    with pytest.raises(RecordError, match="expected 42 columns, found 43"):
        read_channels(str(path))


def test_read_channels_reports_undecodable_text(tmp_path: Path) -> None:
    path = tmp_path / "channels.csv"
    write_channels_export(path, [cm_channel("Bjorn")])
    path.write_bytes(path.read_bytes().replace(b"Bjorn", b"Bj\xf8rn"))

    with pytest.raises(RecordError, match="not valid UTF-8"):
        read_channels(str(path))


def test_read_channels_reports_bad_numbers(tmp_path: Path) -> None:
    path = tmp_path / "channels.csv"
    write_channels_export(path, [cm_channel("Bad", tx_freq="four-three-three")])

    with pytest.raises(RecordError, match="TX frequency"):
        read_channels(str(path))


def test_read_contacts(tmp_path: Path) -> None:
    path = tmp_path / "contacts.csv"
    write_contacts_export(path, [cm_contact("2429135", "LA5AUA Stefan ")])

    contacts = read_contacts(str(path))

    assert len(contacts) == 1
    assert contacts[0].dmr_id == 2429135
    assert contacts[0].call_name == "LA5AUA Stefan "
    assert contacts[0].call_type == "Private Call"


def test_split_call_name() -> None:
    assert split_call_name("LA5AUA Stefan ") == ("LA5AUA", "Stefan")
    assert split_call_name(" LA1ABC ") == ("LA1ABC", "LA1ABC")
    assert split_call_name("LA9XYZ Ola Nordmann") == ("LA9XYZ", "Ola Nordmann")


def test_write_contacts(tmp_path: Path) -> None:
    path = tmp_path / "out_contacts.csv"
    write_contacts(str(path), [
        CmContact(2429135, "LA5AUA Stefan ", "Private Call", "No"),
        CmContact(2421000, "LA1ABC", "Private Call", "No"),
    ])

    rows = read_output(path)
    assert rows[0] == CONTACTS_HEADER
    assert rows[1] == ["1", "2429135", "LA5AUA", "Stefan", "", "", "", "", "Private Call", "None"]
    assert rows[2] == ["2", "2421000", "LA1ABC", "LA1ABC", "", "", "", "", "Private Call", "None"]


def test_write_channels_translates_fields(tmp_path: Path) -> None:
    source = tmp_path / "channels.csv"
    write_channels_export(source, [
        cm_channel("FM", mode="FM", bandwidth="25", tx_freq="145.6", rx_freq="145.0", power="LOW",
                   ctcss_rx="None", ctcss_tx="000.0"),
        cm_channel("TG242", bandwidth="12.5", power="MEDIUM", ctcss_rx="88.5", group_id="242 Norge"),
        cm_channel("TG242 TS1", power="HIGH", group_id="242 Norway", slot="1"),
    ])
    path = tmp_path / "out_channels.csv"
    table = ContactTable()

    write_channels(str(path), read_channels(str(source)), table)

    rows = read_output(path)
    assert rows[0] == CHANNELS_HEADER
    assert all(len(row) == len(CHANNELS_HEADER) for row in rows)

    fm = dict(zip(CHANNELS_HEADER, rows[1]))
    assert fm["Receive Frequency"] == "145.00000"
    assert fm["Transmit Frequency"] == "145.60000"
    assert fm["Channel Type"] == "A-Analog"
    assert fm["Transmit Power"] == "Low"
    assert fm["Band Width"] == "25K"
    assert fm["CTCSS/DCS Decode"] == "Off"
    assert fm["CTCSS/DCS Encode"] == "Off"
    assert fm["Contact"] == ""

    tg = dict(zip(CHANNELS_HEADER, rows[2]))
    assert tg["Channel Type"] == "D-Digital"
    assert tg["Transmit Power"] == "Mid"
    assert tg["Band Width"] == "12.5K"
    assert tg["CTCSS/DCS Decode"] == "88.5"
    assert tg["Contact"] == "242 Norge"
    assert tg["Contact TG/DMR ID"] == "242 Norge"

    renamed = dict(zip(CHANNELS_HEADER, rows[3]))
    assert renamed["Transmit Power"] == "Turbo"
    assert renamed["Contact"] == "242 Norge"
    assert renamed["Contact TG/DMR ID"] == "242 Norway"
    assert renamed["Slot"] == "1"

    assert table.rows() == [(1, 242, "242 Norge")]


def test_output_is_fully_quoted_with_crlf(tmp_path: Path) -> None:
    path = tmp_path / "talkgroups.csv"
    table = ContactTable()
    table.resolve("91 World")

    write_talkgroups(str(path), table)

    content = path.read_bytes().decode("utf-8")
    assert content == (
        '"No.","Radio ID","Name","Call Type","Call Alert"\r\n'
        '"1","91","91 World","Group Call","None"\r\n'
    )


def test_write_zones(tmp_path: Path) -> None:
    path = tmp_path / "zone.csv"

    write_zones(str(path), [ZoneRow(1, "20/30", ("CH3", "CH5"), "CH3", "CH5")])

    assert read_output(path) == [
        ["No.", "Zone Name", "Zone Channel Member", "A Channel", "B Channel"],
        ["1", "20/30", "CH3|CH5", "CH3", "CH5"],
    ]
