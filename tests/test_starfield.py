"""Test the background star field.

Run:
    pytest tests/test_starfield.py -v
"""

import numpy as np
import pytest

from spiralgalaxy import config
from spiralgalaxy.model.random_source import NumpyRandomSource
from spiralgalaxy.model.starfield import generate_star_field


def test_default_star_field(rng):
    stars = generate_star_field(rng)
    assert stars.shape == (config.STAR_FIELD_COUNT, 3)
    assert stars.dtype == np.float32
    half = config.STAR_FIELD_EXTENT / 2
    assert np.abs(stars).max() <= half


def test_custom_extent():
    stars = generate_star_field(NumpyRandomSource(3), count=500, extent=10.0)
    assert np.abs(stars).max() <= 5.0
    assert stars.min() < 0.0 < stars.max()


def test_empty_star_field(rng):
    assert generate_star_field(rng, count=0).shape == (0, 3)


def test_negative_count_rejected(rng):
    with pytest.raises(ValueError):
        generate_star_field(rng, count=-1)
