import csv
from collections import namedtuple

from zoning import ChannelRecord


CONTACT_COLUMNS = 9
CHANNEL_COLUMNS = 42

CmContact = namedtuple('CmContact', ['dmr_id', 'call_name', 'call_type', 'alert'])
CmChannel = namedtuple('CmChannel', ['name', 'mode', 'bandwidth', 'tx_freq', 'rx_freq', 'power',
                                     'ctcss_rx', 'ctcss_tx', 'group_id', 'colour', 'slot'])

CONTACTS_HEADER = ['No.', 'Radio ID', 'Callsign', 'Name', 'City', 'State', 'Country', 'Remarks',
                   'Call Type', 'Call Alert']

CHANNELS_HEADER = ['No.', 'Channel Name', 'Receive Frequency', 'Transmit Frequency', 'Channel Type',
                   'Transmit Power', 'Band Width', 'CTCSS/DCS Decode', 'CTCSS/DCS Encode', 'Contact',
                   'Contact Call Type', 'Contact TG/DMR ID', 'Radio ID', 'Busy Lock/TX Permit', 'Squelch Mode',
                   'Optional Signal', 'DTMF ID', '2Tone ID', '5Tone ID', 'PTT ID', 'Color Code', 'Slot',
                   'Scan List', 'Receive Group List', 'TX Prohibit', 'Reverse', 'Simplex TDMA', 'TDMA Adaptive',
                   'Encryption Type', 'Digital Encryption', 'Call Confirmation', 'Talk Around', 'Work Alone',
                   'Custom CTCSS', '2TONE Decode', 'Ranging', 'Through Mode']

TALKGROUPS_HEADER = ['No.', 'Radio ID', 'Name', 'Call Type', 'Call Alert']

ZONES_HEADER = ['No.', 'Zone Name', 'Zone Channel Member', 'A Channel', 'B Channel']

POWER_LEVELS = {'LOW': 'Low', 'MEDIUM': 'Mid'}
CTCSS_OFF = ('None', '000.0')


class RecordError(ValueError):
    """A row of a Contact Manager export could not be read."""

    def __init__(self, filename, line, message):
        super().__init__(f'{filename}, line {line}: {message}')
        self.filename = filename
        self.line = line


def _read_rows(filename, columns):
    with open(filename, 'r', newline='', encoding='utf-8') as csvfile:
        reader = csv.reader(csvfile)
        try:
            next(reader, None)  # Skip header row
            for row in reader:
                if not row:
                    continue
                if len(row) != columns:
                    raise RecordError(filename, reader.line_num,
                                      f'expected {columns} columns, found {len(row)}')
                yield reader.line_num, row
        except UnicodeDecodeError as e:
            # Decoding runs ahead of the reader, so the line is only approximate
            raise RecordError(filename, reader.line_num + 1, f'not valid UTF-8 text ({e.reason})') from None


def _number(filename, line, column, value, kind):
    try:
        return kind(value.strip())
    except ValueError:
        raise RecordError(filename, line, f'{column} is not a number: {value!r}') from None


def read_contacts(filename):
    """Read a Contact Manager contacts file"""
    contacts = []
    for line, row in _read_rows(filename, CONTACT_COLUMNS):
        contacts.append(CmContact(_number(filename, line, 'DMR ID', row[0], int), row[1], row[2], row[3]))
    return contacts


def read_channels(filename):
    """
    Read a Contact Manager channel file

    Only the columns needed for the DJ-MD5 export are kept, the rest of the
    42 columns are ignored.
    """
    channels = []
    for line, row in _read_rows(filename, CHANNEL_COLUMNS):
        channels.append(CmChannel(
            name=row[0],
            mode=row[1],
            bandwidth=_number(filename, line, 'bandwidth', row[2], float),
            tx_freq=_number(filename, line, 'TX frequency', row[3], float),
            rx_freq=_number(filename, line, 'RX frequency', row[4], float),
            power=row[12],
            ctcss_rx=row[18],
            ctcss_tx=row[19],
            group_id=row[36],
            colour=_number(filename, line, 'colour code', row[38], int),
            slot=_number(filename, line, 'slot', row[41], int),
        ))
    return channels


def channel_records(channels):
    return [ChannelRecord(ch.name, ch.group_id) for ch in channels]


def split_call_name(call_name):
    # "LA5AUA Stefan " -> ("LA5AUA", "Stefan")
    call_name = call_name.strip()
    if ' ' not in call_name:
        return call_name, call_name
    callsign, name = call_name.split(' ', 1)
    return callsign, name


def modulation(mode):
    return 'D-Digital' if mode == 'DMR' else 'A-Analog'


def power_level(power):
    return POWER_LEVELS.get(power, 'Turbo')


def ctcss(tone):
    return 'Off' if tone in CTCSS_OFF else tone


def format_frequency(freq):
    return f'{freq:.5f}'


def format_bandwidth(bandwidth):
    return f'{bandwidth:g}K'


def _writer(csvfile):
    return csv.writer(csvfile, quoting=csv.QUOTE_ALL, lineterminator='\r\n')


def contact_row(i, contact):
    callsign, name = split_call_name(contact.call_name)
    return [i, contact.dmr_id, callsign, name, '', '', '', '', contact.call_type, 'None']


def channel_row(i, ch, contact):
    return [i, ch.name, format_frequency(ch.rx_freq), format_frequency(ch.tx_freq), modulation(ch.mode),
            power_level(ch.power), format_bandwidth(ch.bandwidth), ctcss(ch.ctcss_rx), ctcss(ch.ctcss_tx),
            contact, 'Group Call', ch.group_id, '', 'Always', 'Carrier', 'Off', '1',
            '1', '1', 'Off', ch.colour, ch.slot, 'None', 'None', 'Off',
            'Off', 'Off', 'Off', 'Normal Encryption', 'Off', 'Off',
            'Off', 'Off', '251.1', '0', 'Off', 'Off']


def write_contacts(filename, contacts):
    """Write contacts in a format that is readable by the DJ-MD5 CPS"""
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = _writer(csvfile)
        writer.writerow(CONTACTS_HEADER)
        for i, contact in enumerate(contacts, 1):
            writer.writerow(contact_row(i, contact))


def write_channels(filename, channels, contact_table):
    """
    Write channels in a format that is readable by the DJ-MD5 CPS

    Args:
        filename (str): Output file
        channels (list): CmChannel records in input order
        contact_table (ContactTable): Filled with one label per talkgroup id while writing
    """
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = _writer(csvfile)
        writer.writerow(CHANNELS_HEADER)
        for i, ch in enumerate(channels, 1):
            writer.writerow(channel_row(i, ch, contact_table.resolve(ch.group_id)))


def write_talkgroups(filename, contact_table):
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = _writer(csvfile)
        writer.writerow(TALKGROUPS_HEADER)
        for i, group_id, label in contact_table.rows():
            writer.writerow([i, group_id, label, 'Group Call', 'None'])


def write_zones(filename, zone_rows):
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = _writer(csvfile)
        writer.writerow(ZONES_HEADER)
        for row in zone_rows:
            writer.writerow([row.index, row.zone_name, row.members, row.channel_a, row.channel_b])
