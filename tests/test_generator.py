import logging
import math

import pytest

from mandelpoints import (
    BLACK,
    DEFAULT_PALETTE,
    Color,
    GeneratorConfig,
    InvalidArgument,
    Point,
    PointCloudGenerator,
    RequestParams,
    generate_points,
    zoom_out_schedule,
)
from mandelpoints.generator import pixel_to_complex

from conftest import point_index


def test_single_pixel_request():
    points = generate_points(RequestParams(width=0, height=0, max_iter=10, scale_factor=1))
    # (0, 0) maps to c = -2 + 2i, whose first step lands at -2 - 6i.
    assert points == [Point(x=0.0, y=0.0, color=DEFAULT_PALETTE[0])]


@pytest.mark.parametrize("width,height", [(0, 0), (0, 3), (4, 0), (3, 5)])
def test_point_count_is_inclusive(small_config, width, height):
    points = generate_points(RequestParams(width, height, 5, 1), small_config)
    assert len(points) == (width + 1) * (height + 1)


def test_row_major_order(generator, small_params):
    points = generator.generate(small_params)
    assert [p.y for p in points] == [float(j) for i in range(9) for j in range(9)]
    for i in range(9):
        for j in range(9):
            point = points[point_index(i, j, 8)]
            if point.color != BLACK:
                assert point.x == float(i)


def test_known_samples(generator, small_params):
    points = generator.generate(small_params)
    assert points[point_index(0, 0, 8)] == Point(0.0, 0.0, DEFAULT_PALETTE[0])
    # c = 1 escapes on the second step
    assert points[point_index(6, 4, 8)] == Point(6.0, 4.0, DEFAULT_PALETTE[1])
    # c = 0.5 escapes on the fourth step
    assert points[point_index(5, 4, 8)] == Point(5.0, 4.0, Color(255, 170, 100))


def test_bounded_points_carry_final_real_part(generator, small_params):
    points = generator.generate(small_params)
    assert points[point_index(4, 4, 8)] == Point(0.0, 4.0, BLACK)
    assert points[point_index(2, 4, 8)] == Point(-1.0, 4.0, BLACK)
    assert points[point_index(0, 4, 8)] == Point(2.0, 4.0, BLACK)

    odd_budget = generator.generate(RequestParams(8, 8, 9, 1))
    assert odd_budget[point_index(2, 4, 8)] == Point(0.0, 4.0, BLACK)


def test_colors_come_from_palette_or_black(generator):
    allowed = set(DEFAULT_PALETTE) | {BLACK}
    for max_iter in (1, 7, 40):
        points = generator.generate(RequestParams(8, 8, max_iter, 1))
        assert {p.color for p in points} <= allowed


def test_single_iteration_budget(small_config):
    points = generate_points(RequestParams(8, 8, 1, 1), small_config)
    for i in range(9):
        for j in range(9):
            x, y = pixel_to_complex(float(i), float(j), (0, 0), 1, 8.0, 8.0)
            first = (x * x - y * y + x, 2.0 * x * y + y)
            escapes = math.sqrt(first[0] * first[0] + first[1] * first[1]) > 2.0
            expected = DEFAULT_PALETTE[0] if escapes else BLACK
            assert points[point_index(i, j, 8)].color == expected


def test_generation_is_deterministic(generator):
    params = RequestParams(8, 8, 30, 1)
    assert generator.generate(params) == generator.generate(params)


@pytest.mark.parametrize(
    "params",
    [
        RequestParams(8, 8, 10, 1),
        RequestParams(8, 8, 1, 1),
        RequestParams(8, 6, 25, 2),
        RequestParams(5, 8, 25, -1),
        RequestParams(0, 8, 3, 1),
    ],
)
def test_vectorized_matches_scalar(small_config, params):
    scalar = PointCloudGenerator(GeneratorConfig(canvas_width=8, canvas_height=8, vectorized=False))
    assert PointCloudGenerator(small_config).generate(params) == scalar.generate(params)


def test_vectorized_matches_scalar_on_finer_grid():
    vectorized = GeneratorConfig(canvas_width=40, canvas_height=30)
    scalar = GeneratorConfig(canvas_width=40, canvas_height=30, vectorized=False)
    params = RequestParams(40, 30, 60, 1)
    assert generate_points(params, vectorized) == generate_points(params, scalar)


def test_offset_translates_plane(small_params):
    shifted = GeneratorConfig(canvas_width=8, canvas_height=8, offset=(1, 0))
    points = generate_points(small_params, shifted)
    # pixel (2, 4) now maps to c = 0
    assert points[point_index(2, 4, 8)] == Point(0.0, 4.0, BLACK)


def test_custom_palette(small_params):
    red = Color(255, 0, 0)
    config = GeneratorConfig(canvas_width=8, canvas_height=8, palette=(red,))
    points = generate_points(small_params, config)
    assert {p.color for p in points} == {red, BLACK}


@pytest.mark.parametrize(
    "params,field",
    [
        (RequestParams(8, 8, 10, 0), "scale_factor"),
        (RequestParams(-1, 8, 10, 1), "width"),
        (RequestParams(8, -1, 10, 1), "height"),
        (RequestParams(8, 8, 0, 1), "max_iter"),
    ],
)
def test_invalid_requests_are_rejected(generator, params, field):
    with pytest.raises(InvalidArgument) as excinfo:
        generator.generate(params)
    assert excinfo.value.field == field


@pytest.mark.parametrize(
    "kwargs",
    [{"canvas_width": 0}, {"canvas_height": -8}, {"palette": ()}],
)
def test_invalid_config_is_rejected(kwargs):
    with pytest.raises(InvalidArgument):
        GeneratorConfig(**kwargs)


def test_respond_wraps_points(generator):
    response = generator.respond(RequestParams(2, 2, 5, 1))
    assert len(response.points) == 9
    assert response.to_dict()["points"][0]["color"] == DEFAULT_PALETTE[0].to_dict()


def test_generation_logs_timing(generator, caplog):
    with caplog.at_level(logging.INFO, logger="mandelpoints.generator"):
        generator.generate(RequestParams(8, 8, 5, 1))
    assert "time to calculate 81 points" in caplog.text


def test_zoom_out_schedule():
    params = RequestParams(8, 8, 10, 1)
    assert [p.scale_factor for p in zoom_out_schedule(params, 3)] == [1, 2, 3]
    negative = RequestParams(8, 8, 10, -2)
    assert [p.scale_factor for p in zoom_out_schedule(negative, 3)] == [-2, -3, -4]
    assert zoom_out_schedule(params, 0) == []


def test_requests_of_different_sizes_reuse_the_traced_loop(generator):
    from mandelpoints import renderer

    generator.generate(RequestParams(1, 1, 5, 1))
    traced = renderer._escape_run.experimental_get_tracing_count()
    for width in range(2, 9):
        generator.generate(RequestParams(width, 8 - width, 5, 1))
    assert renderer._escape_run.experimental_get_tracing_count() == traced
