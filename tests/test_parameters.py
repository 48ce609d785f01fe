"""Test parameter validation and editing.

Tests for spiralgalaxy.model.parameters:
    - Defaults are valid
    - Each range rule raises InvalidParameterError naming the field
    - replace/to_dict/from_dict

Run:
    pytest tests/test_parameters.py -v
"""

import math

import pytest

from spiralgalaxy.model.color import Color
from spiralgalaxy.model.errors import InvalidParameterError
from spiralgalaxy.model.parameters import DEFAULT_PARAMETERS, GalaxyParameters


def test_defaults_are_valid():
    assert DEFAULT_PARAMETERS.validate() is DEFAULT_PARAMETERS
    assert DEFAULT_PARAMETERS.count == 100_000
    assert DEFAULT_PARAMETERS.inside_color.to_hex() == "#ff6030"
    assert DEFAULT_PARAMETERS.outside_color.to_hex() == "#1b3984"


@pytest.mark.parametrize(
    "field, value",
    [
        ("count", 0),
        ("count", -5),
        ("count", 2.5),
        ("count", True),
        ("branches", 0),
        ("radius", 0.0),
        ("radius", -1.0),
        ("size", 0.0),
        ("randomness", -0.1),
        ("randomness_power", 0.5),
        ("spin", math.nan),
        ("radius", math.inf),
        ("inside_color", Color(1.2, 0.0, 0.0)),
    ],
)
def test_invalid_values_rejected(field, value):
    params = DEFAULT_PARAMETERS.replace(**{field: value})
    with pytest.raises(InvalidParameterError) as info:
        params.validate()
    assert info.value.name == field


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError):
        GalaxyParameters(count=0).validate()


def test_negative_spin_and_zero_randomness_allowed():
    GalaxyParameters(spin=-5.0, randomness=0.0, randomness_power=1.0, branches=1).validate()


def test_parameters_are_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_PARAMETERS.count = 10


def test_replace_returns_new_snapshot():
    edited = DEFAULT_PARAMETERS.replace(branches=7)
    assert edited.branches == 7
    assert DEFAULT_PARAMETERS.branches == 3


def test_dict_roundtrip():
    params = GalaxyParameters(count=500, spin=-2.0, inside_color=Color.from_hex("#102030"))
    assert GalaxyParameters.from_dict(params.to_dict()) == params


def test_from_dict_ignores_unknown_keys():
    params = GalaxyParameters.from_dict({"count": 42, "fog": "#000011"})
    assert params.count == 42
