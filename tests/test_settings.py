import pytest

import settings
from errors import ConfigurationError


@pytest.mark.parametrize("difficulty", [2, 4, 6])
def test_valid_difficulty(difficulty):
    assert settings.validate_difficulty(difficulty) == difficulty


@pytest.mark.parametrize("difficulty", [0, 1, 7, None, 3.5])
def test_invalid_difficulty(difficulty):
    with pytest.raises(ConfigurationError):
        settings.validate_difficulty(difficulty)


def test_clamp_difficulty():
    assert settings.clamp_difficulty(1) == 2
    assert settings.clamp_difficulty(5) == 5
    assert settings.clamp_difficulty(9) == 6


def test_viewport_half_extents():
    half_w, half_h = settings.viewport_half_extents(1600, 900, 5.0)
    assert half_h == 5.0
    assert half_w == pytest.approx(5.0 * 16 / 9)
