#!/usr/bin/env python3
"""
Color conversions between hex strings, sRGB, Oklab and Okhsl.

The Okhsl model follows Bjorn Ottosson's reference implementation
(https://bottosson.github.io/posts/colorpicker/). Every function here is
written against numpy so it works on a single color or on whole grids of
colors at once; the combination search relies on the broadcasting.
"""

import re

import numpy as np


# Oklab <-> linear sRGB matrices
LMS_TO_LINEAR_SRGB = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])

# Okhsl saturation curve: chroma at s=0.8 is C_mid
MID = 0.8
MID_INV = 1.25

# Toe function constants
K_1 = 0.206
K_2 = 0.03
K_3 = (1.0 + K_1) / (1.0 + K_2)


def parse_hex(hex_code):
    """Parse 'RRGGBB' (optionally '#'-prefixed) into three 0-255 integers."""
    digits = hex_code[1:] if hex_code.startswith('#') else hex_code
    if not re.fullmatch(r'[0-9A-Fa-f]{6}', digits):
        raise ValueError(f"Expected 6 hex digits, got {hex_code!r}")
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def hex_to_rgb_u8(hex_code):
    """Convert a hex color to an 8-bit RGB numpy array."""
    return np.array(parse_hex(hex_code), dtype=np.uint8)


def hex_to_rgb(hex_code):
    """Convert a hex color to RGB floats in [0, 1]."""
    return hex_to_rgb_u8(hex_code) / 255.0


def rgb_to_hex(rgb):
    """Format 8-bit RGB as uppercase 'RRGGBB' (no '#')."""
    r, g, b = (int(c) for c in rgb)
    return f"{r:02X}{g:02X}{b:02X}"


def linearize(channel):
    """sRGB EOTF: gamma-encoded channel in [0, 1] to linear light."""
    channel = np.asarray(channel, dtype=np.float64)
    return np.where(
        channel <= 0.04045,
        channel / 12.92,
        ((np.maximum(channel, 0.04045) + 0.055) / 1.055) ** 2.4,
    )


def srgb_transfer(channel):
    """sRGB OETF: linear light to gamma-encoded channel."""
    channel = np.asarray(channel, dtype=np.float64)
    return np.where(
        channel <= 0.0031308,
        12.92 * channel,
        1.055 * np.maximum(channel, 0.0031308) ** (1 / 2.4) - 0.055,
    )


def relative_luminance(rgb):
    """
    WCAG relative luminance of gamma-encoded RGB floats in [0, 1].

    `rgb` has the three channels on its last axis, so an (..., 3) array
    yields an array of luminances.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = linearize(rgb[..., 0]), linearize(rgb[..., 1]), linearize(rgb[..., 2])
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def oklab_to_linear_srgb(L, a, b):
    """Convert Oklab to linear sRGB, returned as a tuple of channel arrays."""
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    lms = (l_ ** 3, m_ ** 3, s_ ** 3)
    return tuple(
        row[0] * lms[0] + row[1] * lms[1] + row[2] * lms[2]
        for row in LMS_TO_LINEAR_SRGB
    )


def linear_srgb_to_oklab(r, g, b):
    """Convert linear sRGB to Oklab."""
    l_ = np.cbrt(0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b)
    m_ = np.cbrt(0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b)
    s_ = np.cbrt(0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b)

    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def toe(x):
    """Map Oklab L to the perceptual lightness used by Okhsl."""
    return 0.5 * (K_3 * x - K_1 + np.sqrt((K_3 * x - K_1) ** 2 + 4 * K_2 * K_3 * x))


def toe_inv(x):
    return (x * x + K_1 * x) / (K_3 * (x + K_2))


def _lms_coefficients(a, b):
    return (
        0.3963377774 * a + 0.2158037573 * b,
        -0.1055613458 * a - 0.0638541728 * b,
        -0.0894841775 * a - 1.2914855480 * b,
    )


def compute_max_saturation(a, b):
    """
    Maximum saturation S = C/L that stays inside sRGB for a hue (a, b).

    `a` and `b` must be normalized so that a^2 + b^2 == 1. A polynomial
    guess per gamut edge is refined with one step of Halley's method.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    red = -1.88170328 * a - 0.80936493 * b > 1
    green = ~red & (1.81444104 * a - 1.19445276 * b > 1)

    def pick(r, g, bl):
        return np.where(red, r, np.where(green, g, bl))

    k0 = pick(1.19086277, 0.73956515, 1.35733652)
    k1 = pick(1.76576728, -0.45954404, -0.00915799)
    k2 = pick(0.59662641, 0.08285427, -1.15130210)
    k3 = pick(0.75515197, 0.12541070, -0.50559606)
    k4 = pick(0.56771245, 0.14503204, 0.00692167)
    wl = pick(*LMS_TO_LINEAR_SRGB[:, 0])
    wm = pick(*LMS_TO_LINEAR_SRGB[:, 1])
    ws = pick(*LMS_TO_LINEAR_SRGB[:, 2])

    S = k0 + k1 * a + k2 * b + k3 * a * a + k4 * a * b

    k_l, k_m, k_s = _lms_coefficients(a, b)

    l_ = 1 + S * k_l
    m_ = 1 + S * k_m
    s_ = 1 + S * k_s

    l, m, s = l_ ** 3, m_ ** 3, s_ ** 3
    l_dS, m_dS, s_dS = 3 * k_l * l_ * l_, 3 * k_m * m_ * m_, 3 * k_s * s_ * s_
    l_dS2, m_dS2, s_dS2 = 6 * k_l * k_l * l_, 6 * k_m * k_m * m_, 6 * k_s * k_s * s_

    f = wl * l + wm * m + ws * s
    f1 = wl * l_dS + wm * m_dS + ws * s_dS
    f2 = wl * l_dS2 + wm * m_dS2 + ws * s_dS2

    return S - f * f1 / (f1 * f1 - 0.5 * f * f2)


def find_cusp(a, b):
    """Return (L, C) of the most saturated in-gamut color for a hue."""
    S_cusp = compute_max_saturation(a, b)
    r, g, bl = oklab_to_linear_srgb(1.0, S_cusp * a, S_cusp * b)
    L_cusp = np.cbrt(1.0 / np.maximum(np.maximum(r, g), bl))
    return L_cusp, L_cusp * S_cusp


def find_gamut_intersection(a, b, L1, C1, L0, cusp):
    """
    Find t such that (L0 * (1 - t) + t * L1, t * C1) lies on the sRGB gamut
    boundary, for the hue (a, b) whose cusp is given.
    """
    L_cusp, C_cusp = cusp

    lower = ((L1 - L0) * C_cusp - (L_cusp - L0) * C1) <= 0
    t_lower = C_cusp * L0 / (C1 * L_cusp + C_cusp * (L0 - L1))

    # Upper half: first intersect with the triangle, then refine with Halley
    t = C_cusp * (L0 - 1) / (C1 * (L_cusp - 1) + C_cusp * (L0 - L1))

    dL = L1 - L0
    dC = C1
    k_l, k_m, k_s = _lms_coefficients(a, b)
    l_dt = dL + dC * k_l
    m_dt = dL + dC * k_m
    s_dt = dL + dC * k_s

    L = L0 * (1 - t) + t * L1
    C = t * C1

    l_ = L + C * k_l
    m_ = L + C * k_m
    s_ = L + C * k_s

    lms = (l_ ** 3, m_ ** 3, s_ ** 3)
    lms_dt = (3 * l_dt * l_ * l_, 3 * m_dt * m_ * m_, 3 * s_dt * s_ * s_)
    lms_dt2 = (6 * l_dt * l_dt * l_, 6 * m_dt * m_dt * m_, 6 * s_dt * s_dt * s_)

    step = np.finfo(np.float64).max
    for row in LMS_TO_LINEAR_SRGB:
        v = row[0] * lms[0] + row[1] * lms[1] + row[2] * lms[2] - 1
        v1 = row[0] * lms_dt[0] + row[1] * lms_dt[1] + row[2] * lms_dt[2]
        v2 = row[0] * lms_dt2[0] + row[1] * lms_dt2[1] + row[2] * lms_dt2[2]
        u = v1 / (v1 * v1 - 0.5 * v * v2)
        step = np.minimum(step, np.where(u >= 0, -v * u, np.finfo(np.float64).max))

    return np.where(lower, t_lower, t + step)


def get_st_mid(a, b):
    """Polynomial fit of the (S, T) pair used for the mid chroma estimate."""
    S = 0.11516993 + 1 / (
        7.44778970 + 4.15901240 * b
        + a * (-2.19557347 + 1.75198401 * b
               + a * (-2.13704948 - 10.02301043 * b
                      + a * (-4.24894561 + 5.38770819 * b + 4.69891013 * a)))
    )
    T = 0.11239642 + 1 / (
        1.61320320 - 0.68124379 * b
        + a * (0.40370612 + 0.90148123 * b
               + a * (-0.27087943 + 0.61223990 * b
                      + a * (0.00299215 - 0.45399568 * b - 0.14661872 * a)))
    )
    return S, T


def get_cs(L, a, b):
    """Return the (C_0, C_mid, C_max) chroma anchors for lightness L and hue (a, b)."""
    cusp = find_cusp(a, b)
    L_cusp, C_cusp = cusp

    C_max = find_gamut_intersection(a, b, L, 1.0, L, cusp)
    S_max, T_max = C_cusp / L_cusp, C_cusp / (1 - L_cusp)

    k = C_max / np.minimum(L * S_max, (1 - L) * T_max)

    S_mid, T_mid = get_st_mid(a, b)
    C_a = L * S_mid
    C_b = (1 - L) * T_mid
    C_mid = 0.9 * k * np.sqrt(np.sqrt(1 / (1 / C_a ** 4 + 1 / C_b ** 4)))

    C_a = L * 0.4
    C_b = (1 - L) * 0.8
    C_0 = np.sqrt(1 / (1 / C_a ** 2 + 1 / C_b ** 2))

    return C_0, C_mid, C_max


def okhsl_to_linear_srgb(h, s, l):
    """
    Okhsl to linear sRGB; `h`, `s` and `l` are in [0, 1] and broadcast.

    Returns an (..., 3) float array. l == 0 and l == 1 map to pure black
    and pure white.
    """
    h, s, l = np.broadcast_arrays(*(np.asarray(v, dtype=np.float64) for v in (h, s, l)))

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        a_ = np.cos(2 * np.pi * h)
        b_ = np.sin(2 * np.pi * h)
        L = toe_inv(l)

        C_0, C_mid, C_max = get_cs(L, a_, b_)

        # s below MID interpolates 0 -> C_mid, above it C_mid -> C_max
        t_low = MID_INV * s
        k_1 = MID * C_0
        k_2 = 1 - k_1 / C_mid
        C_low = t_low * k_1 / (1 - k_2 * t_low)

        t_high = (s - MID) / (1 - MID)
        k_1 = (1 - MID) * C_mid * C_mid * MID_INV * MID_INV / C_0
        k_2 = 1 - k_1 / (C_max - C_mid)
        C_high = C_mid + t_high * k_1 / (1 - k_2 * t_high)

        C = np.where(s < MID, C_low, C_high)
        rgb = np.stack(oklab_to_linear_srgb(L, C * a_, C * b_), axis=-1)

    rgb = np.where((l <= 0)[..., None], 0.0, rgb)
    return np.where((l >= 1)[..., None], 1.0, rgb)


def okhsl_to_srgb_float(h, s, l):
    """Okhsl to gamma-encoded sRGB floats, unclamped."""
    return srgb_transfer(okhsl_to_linear_srgb(h, s, l))


def okhsl_to_srgb(h, s, l):
    """Okhsl to 8-bit sRGB, as an (..., 3) uint8 array."""
    rgb = okhsl_to_srgb_float(h, s, l)
    return np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)


def srgb_float_to_okhsl(rgb):
    """
    Gamma-encoded sRGB floats to Okhsl (h, s, l), all in [0, 1].

    Grays have no hue; they come back with h = 0 and s = 0.
    """
    r, g, b = (float(c) for c in rgb)
    L, a, b_lab = (float(v) for v in linear_srgb_to_oklab(*linearize([r, g, b])))
    C = float(np.hypot(a, b_lab))
    l = float(toe(L))

    if C < 1e-6 or L <= 0 or L >= 1:
        return 0.0, 0.0, l

    a_ = a / C
    b_ = b_lab / C
    h = 0.5 + 0.5 * np.arctan2(-b_lab, -a) / np.pi

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        C_0, C_mid, C_max = (float(v) for v in get_cs(L, a_, b_))

    if C < C_mid:
        k_1 = MID * C_0
        k_2 = 1 - k_1 / C_mid
        t = C / (k_1 + k_2 * C)
        s = t * MID
    else:
        k_1 = (1 - MID) * C_mid * C_mid * MID_INV * MID_INV / C_0
        k_2 = 1 - k_1 / (C_max - C_mid)
        t = (C - C_mid) / (k_1 + k_2 * (C - C_mid))
        s = MID + (1 - MID) * t

    return float(h) % 1.0, s, l


def srgb_to_okhsl(rgb):
    """8-bit sRGB to Okhsl (h, s, l)."""
    return srgb_float_to_okhsl(np.asarray(rgb, dtype=np.float64) / 255.0)
