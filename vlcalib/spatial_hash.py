"""Hash functions for integer voxel coordinates."""

from __future__ import annotations

from typing import Iterable, Tuple

_MASK64 = (1 << 64) - 1
_GOLDEN = 0x9E3779B9

_P1 = 73856093
_P2 = 19349669
_P3 = 83492791


def _coord3(coord: Iterable[int]) -> Tuple[int, int, int]:
    values = tuple(int(c) for c in coord)
    if len(values) != 3:
        raise ValueError(f"expected 3 coordinates, got {len(values)}")
    return values  # type: ignore[return-value]


def vector3i_hash(coord: Iterable[int]) -> int:
    """Combine the three coordinates into a 64-bit hash with hash_combine mixing."""
    seed = 0
    for c in _coord3(coord):
        value = c & _MASK64
        seed ^= (value + _GOLDEN + ((seed << 6) & _MASK64) + (seed >> 2)) & _MASK64
    return seed


def xor_vector3i_hash(coord: Iterable[int]) -> int:
    """Prime-multiply-and-xor spatial hash on 64-bit unsigned arithmetic."""
    x, y, z = _coord3(coord)
    return ((x * _P1) & _MASK64) ^ ((y * _P2) & _MASK64) ^ ((z * _P3) & _MASK64)