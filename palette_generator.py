#!/usr/bin/env python3
"""
Generate hue-balanced Okhsl palettes that stay readable on a background.

Colors are spread evenly around the hue circle from an offset at a fixed
Okhsl lightness and saturation. In random mode the (lightness, saturation,
offset) triple is drawn from the cached set of combinations whose six-way
rotation passes both WCAG and APCA minimums.
"""

import argparse
import sys
from typing import NamedTuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from color_conversion import (
    hex_to_rgb_u8, okhsl_to_srgb, parse_hex, relative_luminance, rgb_to_hex, srgb_to_okhsl,
)
from combination_cache import load_or_gen_combs
from contrast import contrast_scores


DEFAULT_BACKGROUND = "000000"
DEFAULT_SATURATION = 100.0
DEFAULT_LIGHTNESS = 60.0
DEFAULT_OFFSET = 0.0
DEFAULT_COUNT = 6

# Targets used when reporting a palette (stricter than the search minimums)
DISPLAY_WCAG_TARGET = 7.0
DISPLAY_APCA_TARGET = 50.0

PASS_MARK = "✅"
FAIL_MARK = "❌"

SAMPLE_TEXT = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit. Quisque faucibus ex "
    "sapien vitae pellentesque sem placerat. In id cursus mi pretium tellus duis "
    "convallis. Tempus leo eu aenean sed diam urna tempor. Pulvinar vivamus fringilla "
    "lacus nec metus bibendum egestas. Iaculis massa nisl malesuada lacinia integer "
    "nunc posuere. Ut hendrerit semper vel class aptent taciti sociosqu. Ad litora "
    "torquent per conubia nostra inceptos himenaeos."
)

COLOR_SCHEMES = [
    ("Nord", "2E3440", ["bf616a", "a3be8c", "ebcb8b", "81a1c1", "b48ead", "8fbcbb"]),
    ("Dracula", "282a36", ["ff5555", "50fa7b", "f1fa8c", "bd93f9", "ff79c6", "8be9fd"]),
    ("Catppuccin", "1e1e2e", ["f38ba8", "a6e3a1", "f9e2af", "89b4fa", "cba6f7", "94e2d5"]),
    ("Gruvbox", "1d2021", ["fb4934", "b8bb26", "fabd2f", "83a598", "d3869b", "8ec07c"]),
    ("Rosepine", "191724", ["eb6f92", "31748f", "f6c177", "c4a7e7", "ebbcba", "9ccfd8"]),
]


class PaletteColor(NamedTuple):
    hex: str
    rgb: tuple
    hue: float
    wcag: float
    apca: float


def palette_hues(offset, count):
    """Hue degrees for `count` colors spaced evenly from `offset`."""
    if count < 1:
        raise ValueError(f"count must be a positive integer, got {count}")
    return [(offset + n * 360.0 / count) % 360.0 for n in range(count)]


def generate_palette(lightness, saturation, offset, count, background=DEFAULT_BACKGROUND):
    """
    Build `count` colors at the given Okhsl lightness/saturation (percent),
    starting at hue `offset` (degrees), scored against `background`.
    """
    if not 0 <= lightness <= 100:
        raise ValueError(f"lightness must be within 0-100, got {lightness}")
    if not 0 <= saturation <= 100:
        raise ValueError(f"saturation must be within 0-100, got {saturation}")

    bg_u8 = hex_to_rgb_u8(background)
    s = saturation / 100.0
    l = lightness / 100.0

    colors = []
    for hue in palette_hues(offset % 360.0, count):
        rgb = okhsl_to_srgb(hue / 360.0, s, l)
        wcag, apca = contrast_scores(rgb, bg_u8)
        colors.append(PaletteColor(rgb_to_hex(rgb), tuple(int(c) for c in rgb), hue, wcag, apca))
    return colors


def random_combination(combinations, rng=None):
    """Pick one combination uniformly at random, or None if there are none."""
    if not combinations:
        return None
    rng = rng or np.random.default_rng()
    return combinations[int(rng.integers(len(combinations)))]


def meets_display_targets(color):
    return color.wcag >= DISPLAY_WCAG_TARGET and abs(color.apca) >= DISPLAY_APCA_TARGET


def colorize(text, fg, bg=(0, 0, 0)):
    """Wrap `text` in 24-bit ANSI escapes for bold `fg` on `bg`."""
    return (
        f"\x1b[1m\x1b[48;2;{bg[0]};{bg[1]};{bg[2]}m"
        f"\x1b[38;2;{fg[0]};{fg[1]};{fg[2]}m{text}\x1b[0m"
    )


def format_color_line(color, bg):
    wcag_mark = PASS_MARK if color.wcag >= DISPLAY_WCAG_TARGET else FAIL_MARK
    apca_mark = PASS_MARK if abs(color.apca) >= DISPLAY_APCA_TARGET else FAIL_MARK
    return (
        f"{colorize('#' + color.hex, color.rgb, bg)} | "
        f"WCAG: {color.wcag:.2f} {wcag_mark} | APCA: {color.apca:.0f} {apca_mark}"
    )


def print_sample_text(colors):
    """Print the sample paragraph with word colors cycling through `colors`."""
    words = SAMPLE_TEXT.split()

    for title in ("Bold:", "Normal:"):
        print(f"\n{title}")
        line = " ".join(
            "\x1b[1m\x1b[38;2;{};{};{}m{}\x1b[0m".format(*colors[i % len(colors)], word)
            for i, word in enumerate(words)
        )
        print(line)


def analyze_colorschemes():
    """Report contrast and Okhsl coordinates for a few well-known schemes."""
    for name, bg_hex, accents in COLOR_SCHEMES:
        print(f"\n{name} Analysis:")
        print(f"Background: #{bg_hex}")
        print("─" * 65)

        bg_u8 = parse_hex(bg_hex)
        for color_hex in accents:
            fg_u8 = parse_hex(color_hex)
            wcag, apca = contrast_scores(fg_u8, bg_u8)
            h, s, l = srgb_to_okhsl(fg_u8)

            wcag_mark = PASS_MARK if wcag >= DISPLAY_WCAG_TARGET else FAIL_MARK
            apca_mark = PASS_MARK if abs(apca) >= DISPLAY_APCA_TARGET else FAIL_MARK

            print(
                f"{colorize('#' + color_hex.upper(), fg_u8, bg_u8)} | "
                f"WCAG: {wcag:5.2f} {wcag_mark} | APCA: {apca:4.0f} {apca_mark} | "
                f"H:{h * 360:6.1f}° S:{s * 100:4.1f}% L:{l * 100:4.1f}%"
            )


def visualize_palette(colors, background, output_path):
    """Draw the palette on its background and save it as an image."""
    bg = np.array(parse_hex(background)) / 255.0
    n_colors = len(colors)

    fig, ax = plt.subplots(figsize=(2 * n_colors, 2.5))
    fig.patch.set_facecolor(bg)
    ax.set_facecolor(bg)
    ax.set_xlim(0, n_colors)
    ax.set_ylim(0, 1)

    for i, color in enumerate(colors):
        face = np.array(color.rgb) / 255.0
        ax.add_patch(Rectangle((i + 0.1, 0.45), 0.8, 0.45, facecolor=face, edgecolor='none'))

        ax.text(i + 0.5, 0.32, f"#{color.hex}", ha='center', va='center',
                fontsize=11, fontweight='bold', color=face, family='monospace')
        ax.text(i + 0.5, 0.18, f"WCAG {color.wcag:.2f}", ha='center', va='center',
                fontsize=8, color=face)
        ax.text(i + 0.5, 0.08, f"APCA {color.apca:.0f}", ha='center', va='center',
                fontsize=8, color=face)

    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    title_color = 'white' if relative_luminance(bg) < 0.5 else 'black'
    ax.set_title(f"Palette on #{background}", color=title_color)

    plt.tight_layout()
    fig.savefig(output_path, dpi=150, facecolor=fig.get_facecolor())
    plt.close(fig)


def build_parser():
    parser = argparse.ArgumentParser(
        description='Generate evenly spaced Okhsl colors that stay readable on a background.'
    )
    parser.add_argument('-b', '--background', default=DEFAULT_BACKGROUND,
                        help='Background color as RRGGBB (default: %(default)s)')
    parser.add_argument('-s', '--saturation', type=float, default=DEFAULT_SATURATION,
                        help='Okhsl saturation in percent (default: %(default)s)')
    parser.add_argument('-l', '--lightness', type=float, default=DEFAULT_LIGHTNESS,
                        help='Okhsl lightness in percent (default: %(default)s)')
    parser.add_argument('-o', '--offset', type=float, default=DEFAULT_OFFSET,
                        help='Hue of the first color in degrees (default: %(default)s)')
    parser.add_argument('-c', '--count', type=int, default=DEFAULT_COUNT,
                        help='Number of colors (default: %(default)s)')
    parser.add_argument('-r', '--random', action='store_true',
                        help='Pick a random combination that passes on this background')
    parser.add_argument('-a', '--analyze', action='store_true',
                        help='Analyze a few well-known color schemes and exit')
    parser.add_argument('--cache-dir', default=None,
                        help='Directory for combination cache files (default: current directory)')
    parser.add_argument('--plot', default=None, metavar='PATH',
                        help='Also save the palette as an image')
    return parser


def main(argv=None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.analyze:
        analyze_colorschemes()
        return 0

    try:
        bg_u8 = tuple(int(c) for c in hex_to_rgb_u8(args.background))
    except ValueError as e:
        parser.error(str(e))

    lightness, saturation, offset = args.lightness, args.saturation, args.offset

    if args.random:
        combinations = load_or_gen_combs(args.background, cache_dir=args.cache_dir)
        combo = random_combination(combinations)
        if combo is None:
            print("No valid combinations found for this background!", file=sys.stderr)
            return 1

        lightness, saturation, offset = combo
        print(f"Random mode: l={lightness} s={saturation} o={offset}\n")

    try:
        colors = generate_palette(lightness, saturation, offset, args.count, args.background)
    except ValueError as e:
        parser.error(str(e))

    for color in colors:
        print(format_color_line(color, bg_u8))

    print_sample_text([color.rgb for color in colors])

    if not all(meets_display_targets(color) for color in colors):
        print("\nChange lightness and/or saturation for better contrast.")

    if args.plot:
        visualize_palette(colors, args.background, args.plot)
        print(f"\nVisualization saved to: {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
