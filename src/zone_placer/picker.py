"""Name-derived zone choice for claims without a narrowing selector."""

from __future__ import annotations

import logging
import random
import re
from typing import TYPE_CHECKING

from zone_placer.errors import UnsatisfiableError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_UINT32 = 0xFFFFFFFF

_ORDINAL = re.compile(r"[0-9]+")


def fnv1_32(data: bytes) -> int:
    """32-bit FNV-1 hash of *data*."""
    h = _FNV32_OFFSET
    for byte in data:
        h = (h * _FNV32_PRIME) & _UINT32
        h ^= byte
    return h


def _split_ordinal(name: str) -> tuple[str, int]:
    """Return the string to hash and the ordinal offset for *name*.

    ``<claim>-<set>-<n>`` hashes only ``<set>`` with ordinal ``n``, so every
    claim of one replica lands in the same zone while consecutive replicas
    spread across zones. ``<name>-<n>`` hashes ``<name>``. Anything else is
    hashed whole with ordinal 0.
    """
    prefix, dash, suffix = name.rpartition("-")
    if not dash or not _ORDINAL.fullmatch(suffix):
        return name, 0
    ordinal = int(suffix)
    if ordinal > _UINT32:
        return name, 0
    # Claim and set names may both contain dashes; only the last segment is kept.
    return prefix.rpartition("-")[2], ordinal


def choose_zone(zones: Iterable[str], name: str) -> str:
    """Pick one zone for the claim *name*.

    Zones are round-robined by a hash of the name, offset by a trailing
    ordinal when the name has one. The result depends only on the sorted
    zones and the name. An empty *name* falls back to a random zone: this
    is not reproducible, so callers that need stable placement must always
    pass a name.

    Raises:
        UnsatisfiableError: If *zones* is empty.
    """
    zone_list = sorted(zones)
    if not zone_list:
        raise UnsatisfiableError("no zones to choose from")

    if not name:
        logger.warning("No name defined during volume create; choosing random zone")
        hash_value = random.getrandbits(32)
        ordinal = 0
    else:
        hash_string, ordinal = _split_ordinal(name)
        if hash_string != name:
            logger.debug("Detected StatefulSet-style volume name %r; index=%d", name, ordinal)
        hash_value = fnv1_32(hash_string.encode("utf-8"))

    zone = zone_list[((hash_value + ordinal) & _UINT32) % len(zone_list)]
    logger.info("Creating volume for claim %r; chose zone=%r from zones=%s", name, zone, zone_list)
    return zone
