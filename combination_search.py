#!/usr/bin/env python3
"""
Exhaustive search for (lightness, saturation, offset) triples whose full
six-way hue rotation stays readable on a given background.

The result is an ordered list. Its order is part of the contract because the
cache file stores records in exactly this order: lightness ascending, then
saturation ascending, then offset ascending.
"""

from typing import NamedTuple

import numpy as np

from color_conversion import hex_to_rgb, hex_to_rgb_u8, okhsl_to_srgb, relative_luminance
from contrast import apca_contrast, passes_contrast, wcag_contrast


LIGHTNESS_STEPS = 101
SATURATION_STEPS = 101
OFFSET_STEPS = 360
ROTATIONS = 6
ROTATION_STEP = 360 // ROTATIONS


class ValidCombination(NamedTuple):
    """One grid point that passed the search."""
    lightness: int   # 0-100
    saturation: int  # 0-100
    offset: int      # 0-359


def rotation_hues(offset):
    """Hue degrees of the six rotations starting at `offset`."""
    return [(offset + n * ROTATION_STEP) % 360 for n in range(ROTATIONS)]


def is_valid_combination(lightness, saturation, offset, background):
    """
    Check a single grid point against `background` (hex string).

    Stops at the first rotation that fails either contrast minimum.
    """
    bg_u8 = hex_to_rgb_u8(background)
    bg_lum = relative_luminance(hex_to_rgb(background))

    for hue in rotation_hues(offset):
        rgb = okhsl_to_srgb(hue / 360.0, saturation / 100.0, lightness / 100.0)
        fg_lum = relative_luminance(rgb / 255.0)
        if not passes_contrast(wcag_contrast(bg_lum, fg_lum), apca_contrast(rgb, bg_u8)):
            return False
    return True


def passing_hues(lightness, bg_u8, bg_lum):
    """
    Score every (saturation, hue) pair for one lightness.

    Returns a (SATURATION_STEPS, OFFSET_STEPS) boolean mask; entry [s, h]
    is True when hue h at saturation s passes both minimums.
    """
    hues = np.arange(OFFSET_STEPS) / 360.0
    saturations = np.arange(SATURATION_STEPS) / 100.0

    rgb = okhsl_to_srgb(hues[None, :], saturations[:, None], lightness / 100.0)
    fg_lum = relative_luminance(rgb / 255.0)
    return passes_contrast(wcag_contrast(bg_lum, fg_lum), apca_contrast(rgb, bg_u8))


def gen_valid_combs(background, verbose=True):
    """
    Scan the full lightness x saturation x offset grid for `background`.

    A background that admits no combination yields an empty list.
    """
    bg_u8 = hex_to_rgb_u8(background)
    bg_lum = relative_luminance(hex_to_rgb(background))

    # rotation_index[o] lists the hue columns that offset o needs
    offsets = np.arange(OFFSET_STEPS)
    rotation_index = (offsets[:, None] + ROTATION_STEP * np.arange(ROTATIONS)[None, :]) % 360

    valid = []

    if verbose:
        print("Computing valid combinations... this takes a few seconds on the first run")

    for l in range(LIGHTNESS_STEPS):
        passing = passing_hues(l, bg_u8, bg_lum)
        all_pass = passing[:, rotation_index].all(axis=2)

        # nonzero walks row-major: saturation first, then offset
        for s, o in zip(*np.nonzero(all_pass)):
            valid.append(ValidCombination(l, int(s), int(o)))

        if verbose and l % 10 == 0:
            print(f"Progress: {l}%")

    return valid
