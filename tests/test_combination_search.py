import numpy as np
import pytest

import combination_search
from combination_search import (
    OFFSET_STEPS,
    SATURATION_STEPS,
    ValidCombination,
    gen_valid_combs,
    is_valid_combination,
    passing_hues,
    rotation_hues,
)
from color_conversion import hex_to_rgb, hex_to_rgb_u8, relative_luminance


def test_rotation_hues_wrap():
    assert rotation_hues(0) == [0, 60, 120, 180, 240, 300]
    assert rotation_hues(300) == [300, 0, 60, 120, 180, 240]


def test_valid_combination_is_immutable_record():
    combo = ValidCombination(60, 100, 359)
    assert combo.lightness == 60
    assert combo.saturation == 100
    assert combo.offset == 359
    with pytest.raises(AttributeError):
        combo.offset = 1


def test_passing_hues_shape():
    mask = passing_hues(50, hex_to_rgb_u8("000000"), relative_luminance(hex_to_rgb("000000")))
    assert mask.shape == (SATURATION_STEPS, OFFSET_STEPS)
    assert mask.dtype == bool


def test_black_background_has_combinations(black_combinations):
    assert len(black_combinations) > 0
    assert all(isinstance(c, ValidCombination) for c in black_combinations)


def test_results_follow_scan_order(black_combinations):
    # lightness, then saturation, then offset, all ascending and unique
    assert black_combinations == sorted(set(black_combinations))


def test_results_stay_on_grid(black_combinations):
    for l, s, o in black_combinations:
        assert 0 <= l <= 100
        assert 0 <= s <= 100
        assert 0 <= o <= 359


def test_light_gray_passes_every_offset_on_black(black_combinations):
    found = set(black_combinations)
    assert all(ValidCombination(80, 0, o) in found for o in range(360))
    # black text can never pass on a black background
    assert not any(c.lightness == 0 for c in black_combinations)


def test_dark_gray_passes_on_white(white_combinations):
    found = set(white_combinations)
    assert ValidCombination(20, 0, 0) in found
    assert not any(c.lightness == 100 for c in white_combinations)


def test_backgrounds_give_different_results(black_combinations, white_combinations):
    assert set(black_combinations) != set(white_combinations)


def test_scalar_check_agrees_with_scan(black_combinations):
    found = set(black_combinations)
    rng = np.random.default_rng(7)

    samples = [black_combinations[i] for i in rng.integers(len(black_combinations), size=25)]
    for _ in range(25):
        samples.append(ValidCombination(
            int(rng.integers(101)), int(rng.integers(101)), int(rng.integers(360))
        ))

    for combo in samples:
        assert is_valid_combination(*combo, "000000") == (combo in found)


def test_scalar_check_rejects_black_on_black():
    assert not is_valid_combination(0, 0, 0, "000000")
    assert is_valid_combination(80, 0, 123, "000000")


def test_empty_result_is_not_an_error(monkeypatch):
    monkeypatch.setattr(
        combination_search, "passing_hues",
        lambda l, bg_u8, bg_lum: np.zeros((SATURATION_STEPS, OFFSET_STEPS), dtype=bool),
    )
    assert gen_valid_combs("777777", verbose=False) == []


def test_one_failing_rotation_rejects_offset(monkeypatch):
    def fake_passing(l, bg_u8, bg_lum):
        mask = np.zeros((SATURATION_STEPS, OFFSET_STEPS), dtype=bool)
        if l == 42:
            mask[5, :] = True
            mask[5, 90] = False
        return mask

    monkeypatch.setattr(combination_search, "passing_hues", fake_passing)
    result = gen_valid_combs("000000", verbose=False)

    # offsets whose rotation lands on hue 90 are 30, 90, 150, 210, 270, 330
    offsets = [c.offset for c in result]
    assert all(c.lightness == 42 and c.saturation == 5 for c in result)
    assert len(result) == 354
    assert not {30, 90, 150, 210, 270, 330} & set(offsets)
    assert offsets == sorted(offsets)


def test_progress_is_reported_every_tenth(monkeypatch, capsys):
    monkeypatch.setattr(
        combination_search, "passing_hues",
        lambda l, bg_u8, bg_lum: np.zeros((SATURATION_STEPS, OFFSET_STEPS), dtype=bool),
    )
    gen_valid_combs("000000")
    out = capsys.readouterr().out
    assert "Computing valid combinations" in out
    assert [line for line in out.splitlines() if line.startswith("Progress")] == [
        f"Progress: {p}%" for p in range(0, 101, 10)
    ]
