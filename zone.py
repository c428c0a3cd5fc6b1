#!/usr/bin/env python3

import argparse
import os
import sys
from tabulate import tabulate

from translate import (RecordError, channel_records, read_channels, read_contacts, write_channels,
                       write_contacts, write_talkgroups, write_zones)
from zoning import MERGE_THRESHOLD, SPLIT_THRESHOLD, ContactTable, build_zones, check_thresholds


parser = argparse.ArgumentParser(description='Translate Contact Manager CSV exports to DJ-MD5 CPS import files.')

parser.add_argument('-c', '--input-contacts', help='Input contacts file.')
parser.add_argument('-C', '--output-contacts', help='Output contacts file.')
parser.add_argument('-f', '--input-channels', help='Input channels & frequency file.')
parser.add_argument('-F', '--output-channels', help='Output channels & frequency file.')
parser.add_argument('-G', '--output-groups', help='Output talkgroups found in the channels to this file.')
parser.add_argument('-Z', '--output-zones', default='zone.csv',
                    help='Output zones file. Written whenever channels are converted. Default is "zone.csv".')
parser.add_argument('-o', '--output', default='.',
                    help='Output directory for generated files. Default is the current directory.')

parser.add_argument('--merge-threshold', default=MERGE_THRESHOLD, type=int,
                    help='Keep merging the two smallest zones while their channel counts add up to less than '
                         f'this. Defaults to {MERGE_THRESHOLD}.')
parser.add_argument('--split-threshold', default=SPLIT_THRESHOLD, type=int,
                    help=f'Split zones holding more channels than this in two. Defaults to {SPLIT_THRESHOLD}.')
parser.add_argument('-q', '--quiet', action='store_true', help='Do not print the zone table.')


def output_path(args, filename):
    return os.path.join(args.output, filename)


def convert_contacts(args):
    try:
        contacts = read_contacts(args.input_contacts)
    except (OSError, RecordError) as e:
        sys.exit(f'failed reading contacts: {e}')

    contacts_file = output_path(args, args.output_contacts)
    write_contacts(contacts_file, contacts)
    print(f'Contacts CSV file "{contacts_file}" written.')
    print(f'Saved {len(contacts)} contacts')


def convert_channels(args):
    try:
        channels = read_channels(args.input_channels)
    except (OSError, RecordError) as e:
        sys.exit(f'failed reading channels: {e}')

    contact_table = ContactTable()
    channels_file = output_path(args, args.output_channels)
    write_channels(channels_file, channels, contact_table)
    print(f'Channels CSV file "{channels_file}" written.')
    print(f'Saved {len(channels)} channels')

    if args.output_groups:
        groups_file = output_path(args, args.output_groups)
        write_talkgroups(groups_file, contact_table)
        print(f'Talkgroups CSV file "{groups_file}" written.')
        print(f'Saved {len(contact_table)} groups')

    zone_rows, (merges, splits) = build_zones(channel_records(channels), args.merge_threshold,
                                              args.split_threshold)

    if not args.quiet and zone_rows:
        print('\n',
              tabulate([[row.index, row.zone_name, len(row.channels), row.channel_a, row.channel_b]
                        for row in zone_rows],
                       headers=['No.', 'Zone Name', 'Channels', 'A Channel', 'B Channel'],
                       disable_numparse=True),
              '\n')

    zones_file = output_path(args, args.output_zones)
    write_zones(zones_file, zone_rows)
    print(f'Zones CSV file "{zones_file}" written.')
    print(f'Saved {len(zone_rows)} zones ({merges} merges, {splits} splits)')


if __name__ == '__main__':
    args = parser.parse_args()

    do_contacts = args.input_contacts and args.output_contacts
    do_channels = args.input_channels and args.output_channels
    if not do_contacts and not do_channels:
        parser.error('nothing to do, give -c/-C to convert contacts and/or -f/-F to convert channels')

    try:
        check_thresholds(args.merge_threshold, args.split_threshold)
    except ValueError as e:
        parser.error(str(e))

    if not os.path.exists(args.output):
        os.makedirs(args.output)

    if do_contacts:
        convert_contacts(args)
    if do_channels:
        convert_channels(args)
