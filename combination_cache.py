#!/usr/bin/env python3
"""
On-disk cache for the combination search.

One file per background, named `valid_combs.bin.<background>` with the
background string used verbatim (so '1e1e2e' and '1E1E2E' are different
files). The file is a bare stream of 4-byte records:

    [lightness: u8][saturation: u8][offset: u16 little-endian]

There is no header. Records appear in search order.
"""

import sys
from pathlib import Path

import numpy as np

from combination_search import ValidCombination, gen_valid_combs


CACHE_FILE = "valid_combs.bin"

RECORD_DTYPE = np.dtype([
    ('lightness', 'u1'),
    ('saturation', 'u1'),
    ('offset', '<u2'),
])


def cache_path(background, cache_dir=None):
    """Return the cache file path for `background`."""
    return Path(cache_dir or ".") / f"{CACHE_FILE}.{background}"


def encode_combinations(combinations):
    """Pack combinations into the 4-byte record layout."""
    records = np.array([tuple(c) for c in combinations], dtype=RECORD_DTYPE)
    return records.tobytes()


def decode_combinations(data):
    """Unpack records; an incomplete trailing record is dropped."""
    count = len(data) // RECORD_DTYPE.itemsize
    if count == 0:
        return []
    records = np.frombuffer(data, dtype=RECORD_DTYPE, count=count)
    return [
        ValidCombination(int(l), int(s), int(o))
        for l, s, o in records.tolist()
    ]


def read_cache(path):
    """Read a cache file, or return None if it cannot be read."""
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"Could not read cache {path}: {e}", file=sys.stderr)
        return None
    return decode_combinations(data)


def write_cache(path, combinations):
    """Write combinations to `path`. Returns False if the write failed."""
    try:
        path.write_bytes(encode_combinations(combinations))
    except OSError as e:
        print(f"Could not write cache {path}: {e}", file=sys.stderr)
        return False
    return True


def load_or_gen_combs(background, cache_dir=None, verbose=True):
    """
    Load the valid combinations for `background` from its cache file,
    running the full search (and caching its result) on a miss.

    A cache hit is trusted as-is; it is never merged with a fresh search.
    """
    path = cache_path(background, cache_dir)

    if path.exists():
        if verbose:
            print("Loading cached combinations...")
        combinations = read_cache(path)
        if combinations is not None:
            if verbose:
                print(f"Loaded {len(combinations)} valid combinations")
            return combinations

    combinations = gen_valid_combs(background, verbose=verbose)

    if write_cache(path, combinations) and verbose:
        print(f"Cached {len(combinations)} combinations to {path}")

    return combinations
