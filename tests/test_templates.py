"""
Template engine contract, the Jinja2 engine and the JSON fallback.
"""

import datetime
import json

import pytest
from jinja2 import TemplateNotFound

from routemark.templates import (
    FallbackTemplateEngine,
    Jinja2TemplateEngine,
    RenderModel,
    build_engine,
)

from fixtures_app.engines import TEMPLATES_DIR, BrokenTemplates, SiteTemplates


class TestBuildEngine:

    def test_factory(self):
        assert isinstance(build_engine(SiteTemplates), SiteTemplates)

    def test_fresh_instance_each_call(self):
        assert build_engine(SiteTemplates) is not build_engine(SiteTemplates)

    def test_no_factory(self):
        assert isinstance(build_engine(None), FallbackTemplateEngine)

    def test_failing_factory(self, caplog):
        assert isinstance(build_engine(BrokenTemplates), FallbackTemplateEngine)
        assert "Couldn't instantiate template engine BrokenTemplates" in caplog.text

    def test_object_without_render(self):
        assert isinstance(build_engine(object), FallbackTemplateEngine)

    def test_duck_typed_engine(self):
        class Upper:
            def render(self, model, template_name):
                return template_name.upper()

        engine = build_engine(Upper)
        assert engine.render({}, "abc") == "ABC"


class TestJinja2TemplateEngine:

    def test_render(self):
        engine = Jinja2TemplateEngine(str(TEMPLATES_DIR))
        assert engine.render({"message": "hi"}, "message.html").strip() == "hi"

    def test_class_level_search_path(self):
        assert SiteTemplates().search_paths == [str(TEMPLATES_DIR)]

    def test_autoescape(self):
        body = SiteTemplates().render({"message": "<b>"}, "message.html")
        assert "&lt;b&gt;" in body

    def test_render_model(self):
        body = SiteTemplates().render_model(RenderModel({"users": ["ada"]}, "users/list.html"))
        assert "<li>ada</li>" in body

    def test_missing_template(self):
        with pytest.raises(TemplateNotFound):
            SiteTemplates().render({}, "nope.html")

    def test_template_name_required(self):
        with pytest.raises(ValueError):
            SiteTemplates().render({}, None)

    def test_globals_and_filters(self, tmp_path):
        (tmp_path / "t.html").write_text("{{ site }} {{ name | shout }}")
        engine = Jinja2TemplateEngine(
            tmp_path,
            globals={"site": "routemark"},
            filters={"shout": lambda s: s.upper() + "!"},
        )
        assert engine.render({"name": "ada"}, "t.html") == "routemark ADA!"


class TestFallbackTemplateEngine:

    def test_serializes_model(self, caplog):
        body = FallbackTemplateEngine().render({"a": 1, "b": [1, 2]}, "page.html")
        assert json.loads(body) == {"a": 1, "b": [1, 2]}
        assert "serializing model for template page.html" in caplog.text

    def test_unencodable_values_stringified(self):
        when = datetime.date(2024, 1, 2)
        body = FallbackTemplateEngine().render({"when": when})
        assert json.loads(body) == {"when": "2024-01-02"}

    def test_empty_model(self):
        assert FallbackTemplateEngine().render(None) == "{}"
