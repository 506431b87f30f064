from __future__ import annotations

from starlette.requests import Request

from starlette_inertia.context import (
    props_from_request,
    validation_errors_from_request,
    with_prop,
    with_props,
    with_validation_errors,
)


def test_request_props_default_empty(make_request):
    r = make_request()
    assert props_from_request(r) == {}
    assert validation_errors_from_request(r) == {}


def test_with_props_merges_and_is_visible_on_same_scope(make_request):
    r = make_request()
    with_props(r, {"foo": "bar", "abc": "123"})
    with_prop(r, "foo", "baz")

    # Another Request over the same scope (e.g. the handler's) sees the same props.
    again = Request(r.scope)
    assert props_from_request(again) == {"foo": "baz", "abc": "123"}


def test_request_props_are_not_shared_between_requests(make_request):
    first, second = make_request(), make_request()
    with_props(first, {"foo": "bar"})
    assert props_from_request(second) == {}


def test_with_validation_errors(make_request):
    r = make_request()
    with_validation_errors(r, {"email": "required"})
    with_validation_errors(r, {"name": "too short"})
    assert validation_errors_from_request(r) == {"email": "required", "name": "too short"}
