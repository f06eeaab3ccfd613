"""
Controller, Route and Filter decorators and the metadata they attach.
"""

import dataclasses

import pytest

from routemark.controller.decorators import (
    Controller, Route, GET, POST, PUT, DELETE, OPTIONS, Filter, Before, After,
)
from routemark.controller.metadata import (
    CONTROLLER_ATTR,
    FILTER_ATTR,
    ROUTE_ATTR,
    ControllerMetadata,
    FilterPhase,
    HttpMethod,
    RouteMetadata,
    join_path,
)
from routemark.sockets.decorators import Socket
from routemark.controller.metadata import SOCKET_ATTR


# ============================================================================
# Path joining
# ============================================================================

class TestJoinPath:

    @pytest.mark.parametrize("base, path, expected", [
        ("/users/", "/list", "/users/list"),
        ("/users", "/list", "/users/list"),
        ("", "/list", "/list"),
        ("/", "/", "/"),
        ("", "", "/"),
        ("/users/", "/", "/users/"),
        ("/api", "items", "/api/items"),
    ])
    def test_join(self, base, path, expected):
        assert join_path(base, path) == expected

    def test_route_full_path(self):
        meta = RouteMetadata(path="/list", http_method=HttpMethod.GET)
        assert meta.full_path("/users/") == "/users/list"

    def test_normalized_base(self):
        assert ControllerMetadata("/users/").normalized_base == "/users"


# ============================================================================
# Enums
# ============================================================================

class TestEnums:

    def test_http_method_parse(self):
        assert HttpMethod.parse("delete") is HttpMethod.DELETE
        assert HttpMethod.parse(HttpMethod.PUT) is HttpMethod.PUT

    def test_http_method_parse_unknown(self):
        with pytest.raises(ValueError):
            HttpMethod.parse("PATCH")

    def test_filter_phase_parse(self):
        assert FilterPhase.parse("AFTER") is FilterPhase.AFTER
        assert FilterPhase.parse(FilterPhase.BEFORE) is FilterPhase.BEFORE


# ============================================================================
# Decorators
# ============================================================================

class TestControllerDecorator:

    def test_attaches_base_path(self):
        @Controller("/users/")
        class Users:
            pass

        meta = getattr(Users, CONTROLLER_ATTR)
        assert isinstance(meta, ControllerMetadata)
        assert meta.base_path == "/users/"

    def test_default_base_path(self):
        @Controller()
        class Pages:
            pass

        assert getattr(Pages, CONTROLLER_ATTR).base_path == ""

    def test_returns_same_class(self):
        class Plain:
            pass

        assert Controller("/x")(Plain) is Plain


class TestRouteDecorators:

    @pytest.mark.parametrize("decorator, method", [
        (GET, HttpMethod.GET),
        (POST, HttpMethod.POST),
        (PUT, HttpMethod.PUT),
        (DELETE, HttpMethod.DELETE),
        (OPTIONS, HttpMethod.OPTIONS),
    ])
    def test_verb_decorators(self, decorator, method):
        @decorator("/thing", template="thing.html")
        def handler(self, request, response):
            pass

        (meta,) = getattr(handler, ROUTE_ATTR)
        assert meta.http_method is method
        assert meta.path == "/thing"
        assert meta.template_name == "thing.html"

    def test_route_defaults_to_get(self):
        @Route("/x")
        def handler(self, request, response):
            pass

        assert getattr(handler, ROUTE_ATTR)[0].http_method is HttpMethod.GET

    def test_route_method_by_name(self):
        @Route("/x", method="post")
        def handler(self, request, response):
            pass

        assert getattr(handler, ROUTE_ATTR)[0].http_method is HttpMethod.POST

    def test_stacked_routes_keep_application_order(self):
        @GET("/")
        @GET("/home")
        def home(self, request, response):
            pass

        paths = [meta.path for meta in getattr(home, ROUTE_ATTR)]
        assert paths == ["/home", "/"]

    def test_decorator_returns_function(self):
        def handler(self, request, response):
            return 1

        assert GET("/x")(handler) is handler

    def test_metadata_is_frozen(self):
        meta = RouteMetadata(path="/x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            meta.path = "/y"


class TestFilterDecorators:

    def test_default_phase_is_before(self):
        @Filter()
        def hook(self, request, response):
            pass

        assert getattr(hook, FILTER_ATTR).phase is FilterPhase.BEFORE

    def test_when_by_name(self):
        @Filter(when="after")
        def hook(self, request, response):
            pass

        assert getattr(hook, FILTER_ATTR).phase is FilterPhase.AFTER

    def test_before_and_after(self):
        @Before()
        def first(self, request, response):
            pass

        @After()
        def last(self, request, response):
            pass

        assert getattr(first, FILTER_ATTR).phase is FilterPhase.BEFORE
        assert getattr(last, FILTER_ATTR).phase is FilterPhase.AFTER


class TestSocketDecorator:

    def test_attaches_path(self):
        @Socket("/chat")
        class Chat:
            pass

        assert getattr(Chat, SOCKET_ATTR).path == "/chat"
