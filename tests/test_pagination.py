# tests/test_pagination.py
from shared.pagination import UNPAGINATED, build_pagination_spec
from shared.responses import AppResponse


def test_spec_with_page_and_size():
    spec = build_pagination_spec(25, page=2, page_size=10)
    assert spec.current_page == 2
    assert spec.page_size == 10
    assert spec.total == 25


def test_spec_defaults_to_unpaginated():
    spec = build_pagination_spec(7)
    assert spec.current_page == UNPAGINATED == -1
    assert spec.page_size == -1
    assert spec.total == 7


def test_envelope_defaults():
    body = AppResponse[list[int]](data=[1, 2], pagination=build_pagination_spec(2))
    dumped = body.model_dump()
    assert dumped["status_code"] == 200
    assert dumped["message"] == "success"
    assert dumped["data"] == [1, 2]
    assert dumped["pagination"] == {"current_page": -1, "page_size": -1, "total": 2}
