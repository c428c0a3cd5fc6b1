from collections import namedtuple


MERGE_THRESHOLD = 50
SPLIT_THRESHOLD = 100
DEFAULT_ZONE = 'Default'
MAX_GROUP_ID = 0xFFFFFFFF

ChannelRecord = namedtuple('ChannelRecord', ['name', 'group_field'])


class ZoneRow(namedtuple('ZoneRow', ['index', 'zone_name', 'channels', 'channel_a', 'channel_b'])):
    __slots__ = ()

    @property
    def members(self):
        return '|'.join(self.channels)


class ZoneInvariantError(RuntimeError):
    """Raised when balancing would corrupt the zone registry."""


def leading_token(group_field):
    return group_field.split(' ')[0]


def parse_group_id(token):
    """Return the numeric group id for a token, or None if it is not one."""
    digits = token[1:] if token.startswith('+') else token
    if not digits.isascii() or not digits.isdigit():
        return None
    group_id = int(digits)
    if group_id > MAX_GROUP_ID:
        return None
    return group_id


class ContactTable:
    """
    Maps numeric talkgroup ids to a single label.

    The first channel seen with a given id decides the label, later channels
    carrying the same id get that label back even if their group field is
    spelled differently.
    """

    def __init__(self):
        self.groups = {}

    def resolve(self, group_field):
        """
        Get the contact label for a channel's raw group field

        Args:
            group_field (str): Raw group field like "2402 Norway"

        Returns:
            str: Contact label, empty if the field has no numeric id
        """
        if not group_field:
            return ''

        group_id = parse_group_id(leading_token(group_field))
        if group_id is None:
            return ''

        if group_id not in self.groups:
            self.groups[group_id] = group_field
        return self.groups[group_id]

    def rows(self):
        """Talkgroup rows as (No., Radio ID, label), in first-seen order"""
        return [(i, group_id, label) for i, (group_id, label) in enumerate(self.groups.items(), 1)]

    def __len__(self):
        return len(self.groups)

    def __getitem__(self, group_id):
        return self.groups[group_id]


def zone_key(group_field):
    token = leading_token(group_field)
    return token if token else DEFAULT_ZONE


class ZoneRegistry:
    """
    Zone name -> list of channel names.

    The dict is only storage, any decision on which zones to touch must be
    taken from clusters(), which is sorted and independent of dict order.
    """

    def __init__(self):
        self.zones = {}

    def add_channel(self, key, name):
        if key not in self.zones:
            self.zones[key] = []
        self.zones[key].append(name)

    def insert(self, key, channels):
        if key in self.zones:
            raise ZoneInvariantError(f'Zone "{key}" already exists')
        self.zones[key] = channels

    def remove(self, key):
        return self.zones.pop(key)

    def clusters(self):
        return sorted((len(channels), key) for key, channels in self.zones.items())

    def allocate_split_keys(self, base):
        """
        Find two free keys "<base>_<n>" for the halves of a split zone

        Args:
            base (str): Key of the zone being split

        Returns:
            tuple: Both keys, lowest free suffix first
        """
        keys = []
        suffix = 1
        # At most len(zones) suffixes can be taken, so this bound always leaves two free
        limit = len(self.zones) + 2
        while len(keys) < 2:
            if suffix > limit:
                raise ZoneInvariantError(f'No free suffix left to split zone "{base}"')
            key = f'{base}_{suffix}'
            suffix += 1
            if key not in self.zones:
                keys.append(key)
        return tuple(keys)

    def channel_names(self):
        return [name for channels in self.zones.values() for name in channels]

    def keys(self):
        return self.zones.keys()

    def __len__(self):
        return len(self.zones)

    def __getitem__(self, key):
        return self.zones[key]


def group_channels(channels):
    """Put every channel in the zone named after its group field"""
    registry = ZoneRegistry()
    for channel in channels:
        registry.add_channel(zone_key(channel.group_field), channel.name)
    return registry


def check_thresholds(merge_threshold, split_threshold):
    if split_threshold < 1:
        raise ValueError(f'split threshold must be at least 1, got {split_threshold}')
    if merge_threshold < 0:
        raise ValueError(f'merge threshold must not be negative, got {merge_threshold}')
    # Otherwise a freshly merged zone could be split again and merged back forever
    if merge_threshold > split_threshold:
        raise ValueError(f'merge threshold {merge_threshold} is larger than split threshold {split_threshold}')


def merge_smallest(registry, merge_threshold):
    clusters = registry.clusters()
    if len(clusters) < 3:
        return False

    (size_low, key_low), (size_high, key_high) = clusters[0], clusters[1]
    if size_low + size_high >= merge_threshold:
        return False

    head = registry.remove(key_low)
    tail = registry.remove(key_high)
    registry.insert(f'{key_low}/{key_high}', head + tail)
    return True


def split_largest(registry, split_threshold):
    clusters = registry.clusters()
    if not clusters:
        return False

    size, key = clusters[-1]
    if size <= split_threshold:
        return False

    first_key, second_key = registry.allocate_split_keys(key)
    to_split = sorted(registry.remove(key))
    registry.insert(first_key, to_split[:size // 2])
    registry.insert(second_key, to_split[size // 2:])
    return True


def balance(registry, merge_threshold=MERGE_THRESHOLD, split_threshold=SPLIT_THRESHOLD):
    """
    Merge small zones and split big ones until nothing changes

    Merging always wins over splitting: only when no pair of zones can be
    merged is the largest zone considered for a split.

    Args:
        registry (ZoneRegistry): Zones to rebalance, changed in place
        merge_threshold (int): Two smallest zones are merged while their sizes add up to less
        split_threshold (int): Zones with more channels than this are halved

    Returns:
        tuple: Number of merges and number of splits performed
    """
    check_thresholds(merge_threshold, split_threshold)

    merges = 0
    splits = 0
    while True:
        if merge_smallest(registry, merge_threshold):
            merges += 1
            continue
        if split_largest(registry, split_threshold):
            splits += 1
            continue
        break

    return merges, splits


def serialize_zones(registry):
    """Number zones by name and pick the A and B channel of each"""
    rows = []
    for i, key in enumerate(sorted(registry.keys()), 1):
        channels = tuple(sorted(registry[key]))
        channel_a = channels[0] if channels else ''
        channel_b = channels[-1] if channels else ''
        rows.append(ZoneRow(i, key, channels, channel_a, channel_b))
    return rows


def build_zones(channels, merge_threshold=MERGE_THRESHOLD, split_threshold=SPLIT_THRESHOLD):
    """
    Group, balance and number the zones for a list of channel records

    Returns:
        tuple: Zone rows and the (merges, splits) counts from balancing
    """
    registry = group_channels(channels)
    stats = balance(registry, merge_threshold, split_threshold)
    return serialize_zones(registry), stats
