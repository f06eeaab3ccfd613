"""
Route and filter signature validation.
"""

from typing import Any, Dict, Mapping, TypedDict

import pytest

from routemark.controller.validation import HandlerShape, is_mapping_type, is_valid_handler
from routemark.server.request import Request
from routemark.server.response import Response


class JsonRequest(Request):
    pass


class Page(TypedDict):
    title: str


class Handlers:

    def valid(self, request: Request, response: Response) -> dict:
        return {}

    def typed_dict(self, request: Request, response: Response) -> Dict[str, Any]:
        return {}

    def mapping(self, request: Request, response: Response) -> Mapping[str, int]:
        return {}

    def typeddict_return(self, request: Request, response: Response) -> Page:
        return {"title": "x"}

    def subclass_request(self, request: JsonRequest, response: Response) -> dict:
        return {}

    def str_return(self, request: Request, response: Response) -> str:
        return ""

    def no_return(self, request: Request, response: Response):
        pass

    def bad_first(self, request: str, response: Response) -> dict:
        return {}

    def bad_second(self, request: Request, response: int) -> dict:
        return {}

    def unannotated(self, request, response) -> dict:
        return {}

    def only_request(self, request: Request) -> dict:
        return {}

    def extra_required(self, request: Request, response: Response, user: str) -> dict:
        return {}

    def extra_default(self, request: Request, response: Response, verbose: bool = False) -> dict:
        return {}

    def varargs(self, request: Request, response: Response, *args, **kwargs) -> dict:
        return {}

    def unresolvable(self, request: "Nope", response: Response) -> dict:  # noqa: F821
        return {}


def check(name: str, shape: HandlerShape = HandlerShape.ROUTE) -> bool:
    return is_valid_handler(Handlers, getattr(Handlers, name), shape)


class TestRouteShape:

    @pytest.mark.parametrize("name", [
        "valid", "typed_dict", "mapping", "typeddict_return", "subclass_request",
        "extra_default", "varargs",
    ])
    def test_accepted(self, name):
        assert check(name) is True

    @pytest.mark.parametrize("name, reason", [
        ("str_return", "invalid return type"),
        ("no_return", "invalid return type"),
        ("bad_first", "invalid first parameter"),
        ("unannotated", "invalid first parameter"),
        ("bad_second", "invalid second parameter"),
        ("only_request", "invalid second parameter"),
        ("extra_required", "unexpected required parameter 'user'"),
        ("unresolvable", "unresolvable annotations"),
    ])
    def test_rejected_with_reason(self, name, reason, caplog):
        assert check(name) is False
        assert f"Couldn't register method {name} for controller Handlers, {reason}" in caplog.text


class TestFilterShape:

    def test_return_type_not_required(self):
        assert check("no_return", HandlerShape.FILTER) is True
        assert check("str_return", HandlerShape.FILTER) is True

    def test_parameters_still_checked(self, caplog):
        assert check("bad_first", HandlerShape.FILTER) is False
        assert "for filter Handlers" in caplog.text


class TestMappingType:

    @pytest.mark.parametrize("hint", [dict, Dict[str, Any], Mapping[str, int], Page, dict[str, int]])
    def test_mapping(self, hint):
        assert is_mapping_type(hint)

    @pytest.mark.parametrize("hint", [None, str, list, int])
    def test_not_mapping(self, hint):
        assert not is_mapping_type(hint)
