import pytest

from mandelpoints import GeneratorConfig, PointCloudGenerator, RequestParams


@pytest.fixture
def small_config():
    """An 8x8 canvas: pixel (i, j) maps to (i/2 - 2, 2 - j/2) at scale factor 1."""
    return GeneratorConfig(canvas_width=8, canvas_height=8)


@pytest.fixture
def small_params():
    return RequestParams(width=8, height=8, max_iter=10, scale_factor=1)


@pytest.fixture
def generator(small_config):
    return PointCloudGenerator(small_config)


def point_index(i, j, height):
    return i * (height + 1) + j
