"""Volume sizing and naming helpers used alongside zone placement."""

from __future__ import annotations

import re

from zone_placer.errors import QuantityParseError

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB

_SUFFIXES: dict[str, int] = {
    "": 1,
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
    "k": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
    "P": 1000**5,
    "E": 1000**6,
}

_QUANTITY = re.compile(r"([0-9]+)(Ki|Mi|Gi|Ti|Pi|Ei|k|M|G|T|P|E)?")


def parse_quantity(value: int | str) -> int:
    """Convert a storage quantity (``1500Mi``, ``10G``, ``4096``) to bytes.

    Raises:
        QuantityParseError: If *value* is negative or not a whole-number quantity.
    """
    if isinstance(value, int):
        if value < 0:
            raise QuantityParseError(str(value))
        return value
    match = _QUANTITY.fullmatch(value.strip())
    if match is None:
        raise QuantityParseError(value)
    number, suffix = match.groups()
    return int(number) * _SUFFIXES[suffix or ""]


def round_up_size(volume_size_bytes: int, allocation_unit_bytes: int) -> int:
    """How many allocation units are needed to hold *volume_size_bytes*.

    E.g. a 1500MiB request on a backend allocating whole GiB needs
    ``round_up_size(1500 * MIB, GIB) == 2`` units.
    """
    return (volume_size_bytes + allocation_unit_bytes - 1) // allocation_unit_bytes


def round_up_to_gib(size: int | str) -> int:
    return round_up_size(parse_quantity(size), GIB)


def generate_volume_name(cluster_name: str, pv_name: str, max_length: int) -> str:
    """Return ``<cluster_name>-dynamic-<pv_name>`` trimmed to *max_length*.

    The ``<cluster_name>-dynamic`` prefix is cut so the full *pv_name* always fits.
    """
    prefix = f"{cluster_name}-dynamic"
    if len(pv_name) + 1 + len(prefix) > max_length:
        prefix = prefix[: max(max_length - len(pv_name) - 1, 0)]
    return f"{prefix}-{pv_name}"


def calculate_timeout_for_volume(
    minimum_timeout: int, timeout_increment: int, capacity: int | str
) -> int:
    """Timeout for a helper operation on a volume of *capacity*.

    *timeout_increment* per whole GiB, but never less than *minimum_timeout*.
    """
    timeout = (parse_quantity(capacity) // GIB) * timeout_increment
    return max(timeout, minimum_timeout)
