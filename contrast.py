#!/usr/bin/env python3
"""
Contrast metrics between a foreground and a background color.

Two independent scores are computed:

* the WCAG 2.x luminance contrast ratio, symmetric and >= 1;
* an APCA-style perceptual lightness contrast (Lc), signed and asymmetric.
  Positive values mean dark text on a light background, negative values
  light text on a dark background.

Both accept numpy arrays so whole rows of candidate colors can be scored
against one background in a single call.
"""

import numpy as np

from color_conversion import relative_luminance


# Minimums a foreground must reach to be a valid combination
MIN_WCAG_CONTRAST = 4.5
MIN_APCA_CONTRAST = 32.0

# Perceptual contrast constants
SCREEN_EXPONENT = 2.4
SCREEN_COEFFICIENTS = (0.2126729, 0.7151522, 0.0721750)
BLACK_THRESHOLD = 0.022
BLACK_EXPONENT = 1.414
INPUT_CLAMP = 0.0005
OUTPUT_CLAMP = 0.1
SCALE = 1.14
OFFSET = 0.027

NORMAL_BG_EXPONENT = 0.56
NORMAL_FG_EXPONENT = 0.57
REVERSE_BG_EXPONENT = 0.65
REVERSE_FG_EXPONENT = 0.62


def wcag_contrast(lum1, lum2):
    """Calculate the WCAG contrast ratio between two relative luminances."""
    lighter = np.maximum(lum1, lum2)
    darker = np.minimum(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def screen_luminance(rgb_u8):
    """Estimate screen luminance of 8-bit RGB with a plain 2.4 power curve."""
    rgb = np.asarray(rgb_u8, dtype=np.float64) / 255.0
    r, g, b = (rgb[..., i] ** SCREEN_EXPONENT for i in range(3))
    kr, kg, kb = SCREEN_COEFFICIENTS
    return kr * r + kg * g + kb * b


def soft_clamp_black(y):
    """Lift luminances under the black threshold to soften near-black ratios."""
    y = np.asarray(y, dtype=np.float64)
    return np.where(
        y >= BLACK_THRESHOLD,
        y,
        y + np.maximum(BLACK_THRESHOLD - y, 0.0) ** BLACK_EXPONENT,
    )


def apca_contrast(fg, bg):
    """
    Calculate the perceptual contrast (Lc) of 8-bit `fg` text on `bg`.

    The argument order matters: swapping text and background changes both
    the sign and the magnitude of the result.
    """
    fg_y = soft_clamp_black(screen_luminance(fg))
    bg_y = soft_clamp_black(screen_luminance(bg))

    normal = (bg_y ** NORMAL_BG_EXPONENT - fg_y ** NORMAL_FG_EXPONENT) * SCALE
    reverse = (bg_y ** REVERSE_BG_EXPONENT - fg_y ** REVERSE_FG_EXPONENT) * SCALE

    c = np.where(fg_y < bg_y, normal, reverse)
    c = np.where(np.abs(bg_y - fg_y) < INPUT_CLAMP, 0.0, c)

    lc = np.where(c > 0, c - OFFSET, c + OFFSET)
    lc = np.where(np.abs(c) < OUTPUT_CLAMP, 0.0, lc)

    result = lc * 100.0
    return float(result) if result.ndim == 0 else result


def passes_contrast(wcag, apca):
    """Check both scores against the valid-combination minimums."""
    return (wcag >= MIN_WCAG_CONTRAST) & (np.abs(apca) >= MIN_APCA_CONTRAST)


def contrast_scores(fg, bg):
    """Return (wcag, apca) for 8-bit `fg` against 8-bit `bg`."""
    fg_lum = relative_luminance_u8(fg)
    bg_lum = relative_luminance_u8(bg)
    return float(wcag_contrast(bg_lum, fg_lum)), apca_contrast(fg, bg)


def relative_luminance_u8(rgb_u8):
    """WCAG relative luminance of an 8-bit RGB color."""
    return relative_luminance(np.asarray(rgb_u8, dtype=np.float64) / 255.0)
