import pytest

from mandelpoints import BLACK, InvalidArgument, MandelbrotResponse, Point, RequestParams


def test_from_mapping_reads_all_fields():
    params = RequestParams.from_mapping({"width": 800, "height": 600, "max_iter": 300, "scale_factor": 1})
    assert params == RequestParams(width=800, height=600, max_iter=300, scale_factor=1)
    assert params.max_iterations == 300
    assert params.point_count == 801 * 601


def test_from_mapping_ignores_unknown_fields():
    params = RequestParams.from_mapping(
        {"width": 1, "height": 2, "max_iter": 3, "scale_factor": 4, "theme": "dark"}
    )
    assert params.to_dict() == {"width": 1, "height": 2, "max_iter": 3, "scale_factor": 4}


@pytest.mark.parametrize("missing", ["width", "height", "max_iter", "scale_factor"])
def test_from_mapping_requires_every_field(missing):
    payload = {"width": 1, "height": 1, "max_iter": 1, "scale_factor": 1}
    del payload[missing]
    with pytest.raises(InvalidArgument) as excinfo:
        RequestParams.from_mapping(payload)
    assert excinfo.value.field == missing


@pytest.mark.parametrize("value", [1.5, "10", True, None, 2 ** 31, -(2 ** 31) - 1])
def test_from_mapping_rejects_non_int32(value):
    payload = {"width": value, "height": 1, "max_iter": 1, "scale_factor": 1}
    with pytest.raises(InvalidArgument) as excinfo:
        RequestParams.from_mapping(payload)
    assert excinfo.value.field == "width"


def test_from_mapping_rejects_non_objects():
    with pytest.raises(InvalidArgument):
        RequestParams.from_mapping([1, 2, 3, 4])


@pytest.mark.parametrize(
    "params,field",
    [
        (RequestParams(-1, 1, 1, 1), "width"),
        (RequestParams(1, -1, 1, 1), "height"),
        (RequestParams(1, 1, 0, 1), "max_iter"),
        (RequestParams(1, 1, -5, 1), "max_iter"),
        (RequestParams(1, 1, 1, 0), "scale_factor"),
    ],
)
def test_validate_rejects_precondition_violations(params, field):
    with pytest.raises(InvalidArgument) as excinfo:
        params.validate()
    assert excinfo.value.field == field


def test_validate_accepts_empty_rectangle_and_negative_scale():
    assert RequestParams(0, 0, 1, -3).validate() == RequestParams(0, 0, 1, -3)


def test_response_serialization():
    response = MandelbrotResponse(points=[Point(x=-1.0, y=4.0, color=BLACK)])
    assert response.to_dict() == {
        "points": [{"x": -1.0, "y": 4.0, "color": {"red": 0, "green": 0, "blue": 0}}]
    }
    assert MandelbrotResponse().to_dict() == {"points": []}
