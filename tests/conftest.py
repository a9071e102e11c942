"""Shared fixtures for the CipherDash test suite."""

import math

import pytest

from dashcore.config import DashConfig, GlobalConfig
from cipherdash.core.models import Point


# Same four side lengths (100, 113.14, 113.14, 100); only the first
# vertex moves, turning the convex kite into a concave dart.
KITE = [(0, 0), (60, 80), (140, 0), (60, -80)]
DART = [(120, 0), (60, 80), (140, 0), (60, -80)]


def regular_polygon(n, radius=100.0, cx=0.0, cy=0.0):
    return [
        Point(
            x=cx + radius * math.cos(2 * math.pi * i / n),
            y=cy + radius * math.sin(2 * math.pi * i / n),
        )
        for i in range(n)
    ]


@pytest.fixture
def kite():
    return [Point(x=x, y=y) for x, y in KITE]


@pytest.fixture
def dart():
    return [Point(x=x, y=y) for x, y in DART]


@pytest.fixture
def quiet_config():
    return DashConfig(global_settings=GlobalConfig(log_level="WARNING"))


@pytest.fixture
def quiet_config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[global]\nlog_level = "WARNING"\noutput_dir = "%s"\n' % tmp_path.as_posix())
    return str(path)
