import numpy as np
import pytest

import palette_generator
from color_conversion import parse_hex
from combination_search import ValidCombination
from palette_generator import (
    PaletteColor,
    colorize,
    generate_palette,
    main,
    meets_display_targets,
    palette_hues,
    random_combination,
    visualize_palette,
)


def test_palette_hues_are_evenly_spaced():
    assert palette_hues(0, 6) == [0, 60, 120, 180, 240, 300]
    assert palette_hues(350, 4) == [350, 80, 170, 260]
    assert palette_hues(15, 1) == [15]


def test_palette_hues_rejects_zero_count():
    with pytest.raises(ValueError, match="count"):
        palette_hues(0, 0)


def test_default_palette_on_black():
    colors = generate_palette(60, 100, 0, 6, "000000")

    assert len(colors) == 6
    assert [c.hue for c in colors] == [0, 60, 120, 180, 240, 300]
    for color in colors:
        assert len(color.hex) == 6
        assert color.hex == color.hex.upper()
        assert parse_hex(color.hex) == color.rgb
        assert color.wcag >= 1.0
        # light text on a dark background has negative polarity
        assert color.apca < 0


def test_palette_colors_are_distinct():
    colors = generate_palette(60, 100, 0, 6, "000000")
    assert len({c.hex for c in colors}) == 6


def test_offset_wraps_around():
    wrapped = generate_palette(60, 100, 370, 3, "000000")
    plain = generate_palette(60, 100, 10, 3, "000000")
    assert [c.hue for c in wrapped] == [10, 130, 250]
    assert wrapped == plain


@pytest.mark.parametrize("kwargs", [
    dict(lightness=101, saturation=50),
    dict(lightness=-1, saturation=50),
    dict(lightness=50, saturation=150),
])
def test_out_of_range_parameters_rejected(kwargs):
    with pytest.raises(ValueError):
        generate_palette(offset=0, count=6, background="000000", **kwargs)


def test_zero_count_rejected():
    with pytest.raises(ValueError):
        generate_palette(60, 100, 0, 0, "000000")


def test_random_combination():
    assert random_combination([]) is None

    combos = [ValidCombination(l, 0, 0) for l in range(10)]
    rng = np.random.default_rng(3)
    picks = {random_combination(combos, rng) for _ in range(500)}
    assert picks == set(combos)


def test_meets_display_targets():
    assert meets_display_targets(PaletteColor("FFFFFF", (255, 255, 255), 0.0, 21.0, -107.9))
    assert not meets_display_targets(PaletteColor("777777", (119, 119, 119), 0.0, 6.9, -60.0))
    assert not meets_display_targets(PaletteColor("777777", (119, 119, 119), 0.0, 8.0, 49.0))


def test_colorize_wraps_text():
    assert colorize("x", (1, 2, 3), (4, 5, 6)) == "\x1b[1m\x1b[48;2;4;5;6m\x1b[38;2;1;2;3mx\x1b[0m"


def test_visualize_palette_writes_image(tmp_path):
    output = tmp_path / "palette.png"
    visualize_palette(generate_palette(60, 100, 0, 6, "1e1e2e"), "1e1e2e", output)
    assert output.exists()
    assert output.stat().st_size > 0


def test_cli_default_run(capsys):
    assert main([]) == 0

    out = capsys.readouterr().out
    assert sum("WCAG:" in line for line in out.splitlines()) == 6
    assert "Bold:" in out
    assert "Normal:" in out


def test_cli_low_contrast_hint(capsys):
    assert main(["-b", "000000", "-l", "10", "-s", "0", "-c", "2"]) == 0
    assert "Change lightness and/or saturation" in capsys.readouterr().out


def test_cli_analyze(capsys):
    assert main(["--analyze"]) == 0

    out = capsys.readouterr().out
    for name in ("Nord", "Dracula", "Catppuccin", "Gruvbox", "Rosepine"):
        assert f"{name} Analysis:" in out
    assert "H:" in out and "S:" in out and "L:" in out


@pytest.mark.parametrize("argv", [
    ["-c", "0"],
    ["-b", "zzzzzz"],
    ["-b", "12345"],
    ["-l", "120"],
    ["--background=-1-1-1", "-c", "1"],
    ["--background=+f+f+f", "-c", "1"],
])
def test_cli_rejects_invalid_parameters(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_cli_random_mode(monkeypatch, tmp_path, capsys):
    calls = []

    def fake_load(background, cache_dir=None, verbose=True):
        calls.append((background, cache_dir))
        return [ValidCombination(80, 0, 10)]

    monkeypatch.setattr(palette_generator, "load_or_gen_combs", fake_load)

    assert main(["-r", "-b", "000000", "--cache-dir", str(tmp_path)]) == 0
    assert calls == [("000000", str(tmp_path))]
    assert "Random mode: l=80 s=0 o=10" in capsys.readouterr().out


def test_cli_random_mode_without_combinations(monkeypatch, capsys):
    monkeypatch.setattr(palette_generator, "load_or_gen_combs", lambda *a, **kw: [])

    assert main(["-r", "-b", "777777"]) == 1
    assert "No valid combinations found" in capsys.readouterr().err


def test_cli_plot(tmp_path, capsys):
    output = tmp_path / "out.png"
    assert main(["-c", "3", "--plot", str(output)]) == 0
    assert output.exists()
    assert f"Visualization saved to: {output}" in capsys.readouterr().out
