"""Tests for custom template rendering and helpers."""

from dataclasses import replace

import httpx
import pytest

from buildnotify.core.templating import (
    duration,
    format_datetime,
    load_template,
    regex_replace,
    render_trim,
    uppercasefirst,
)
from buildnotify.errors import TemplateError


class TestHelpers:
    def test_duration_seconds_only(self):
        assert duration(100, 120) == "20s"

    def test_duration_minutes(self):
        assert duration(0, 65) == "1m 5s"

    def test_duration_all_units(self):
        assert duration(0, 90061) == "1d 1h 1m 1s"

    def test_duration_zero(self):
        assert duration(5, 5) == "0s"

    def test_duration_negative_clamped(self):
        assert duration(10, 5) == "0s"

    def test_format_datetime_defaults_to_utc(self):
        assert format_datetime(0) == "1970-01-01 00:00:00"

    def test_format_datetime_layout(self):
        assert format_datetime(86400, "%d/%m/%Y") == "02/01/1970"

    def test_format_datetime_unknown_zone(self):
        assert format_datetime(0, "%H:%M", "Not/AZone") == "00:00"

    def test_uppercasefirst(self):
        assert uppercasefirst("deploy") == "Deploy"
        assert uppercasefirst("") == ""

    def test_regex_replace(self):
        assert regex_replace("feature/login-page", r"^feature/", "") == "login-page"


class TestRenderTrim:
    def test_context_fields(self, plugin):
        out = render_trim(
            "{{ repo.owner }}/{{ repo.name }} #{{ build.number }} {{ build.author }}", plugin
        )
        assert out == "acme/api #42 bob"

    def test_strips_whitespace(self, plugin):
        assert render_trim("\n\n  {{ build.branch }}  \n", plugin) == "main"

    def test_commit_message_parts(self, plugin):
        out = render_trim("{{ build.message.title }}|{{ build.message.body }}", plugin)
        assert out == "Fix flaky test|The retry loop never ended."

    def test_filters(self, plugin):
        out = render_trim(
            "{{ build.status | uppercase }} {{ build.event | uppercasefirst }} {{ build.commit | short_sha }}",
            plugin,
        )
        assert out == "SUCCESS Push abcdef12"

    def test_duration_global(self, plugin):
        out = render_trim("took {{ duration(build.started, build.finished) }}", plugin)
        assert out == "took 1m 5s"

    def test_status_tests(self, plugin):
        template = "{% if build.status is success %}ok{% elif build.status is failure %}bad{% endif %}"
        assert render_trim(template, plugin) == "ok"

    def test_config_in_context(self, plugin):
        assert render_trim("{{ config.webhook }}", plugin) == "https://hooks.example.com/x"

    def test_missing_value_renders_empty(self, plugin):
        assert render_trim("[{{ build.nonexistent }}]", plugin) == "[]"

    def test_syntax_error(self, plugin):
        with pytest.raises(TemplateError):
            render_trim("{% for x in %}", plugin)

    def test_undefined_attribute_access(self, plugin):
        with pytest.raises(TemplateError):
            render_trim("{{ missing.attr }}", plugin)


class TestLoadTemplate:
    def test_plain_string(self):
        assert load_template("{{ build.status }}") == "{{ build.status }}"

    def test_leading_mention_is_literal(self):
        assert load_template("@here {{ build.status }}") == "@here {{ build.status }}"

    def test_file_url(self, tmp_path, plugin):
        path = tmp_path / "message.j2"
        path.write_text("build {{ build.number }}\n")
        assert render_trim(f"file://{path}", plugin) == "build 42"

    def test_missing_file(self, tmp_path):
        with pytest.raises(TemplateError):
            load_template(f"file://{tmp_path / 'nope.j2'}")

    def test_remote_template(self, monkeypatch, plugin):
        seen = []

        def fake_get(url, **kwargs):
            seen.append(url)
            return httpx.Response(
                200, text="{{ repo.name }} {{ build.status }}", request=httpx.Request("GET", url)
            )

        monkeypatch.setattr(httpx, "get", fake_get)
        assert render_trim("https://example.com/t.j2", plugin) == "api success"
        assert seen == ["https://example.com/t.j2"]

    def test_remote_template_http_error(self, monkeypatch):
        def fake_get(url, **kwargs):
            return httpx.Response(404, text="missing", request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx, "get", fake_get)
        with pytest.raises(TemplateError):
            load_template("https://example.com/t.j2")

    def test_remote_template_network_error(self, monkeypatch):
        def fake_get(url, **kwargs):
            raise httpx.ConnectError("refused")

        monkeypatch.setattr(httpx, "get", fake_get)
        with pytest.raises(TemplateError):
            load_template("http://example.com/t.j2")


class TestRenderFailures:
    @pytest.mark.parametrize(
        "template",
        [
            "{{ build.branch | regex_replace('(', '') }}",
            "{{ build.number / 0 }}",
            "{{ build.branch | datetime }}",
        ],
    )
    def test_runtime_errors_become_template_errors(self, plugin, template):
        with pytest.raises(TemplateError) as excinfo:
            render_trim(template, plugin)
        assert excinfo.value.__cause__ is not None

    def test_python_internals_are_blocked(self, plugin):
        with pytest.raises(TemplateError):
            render_trim("{{ config.__class__.__mro__[-1].__subclasses__() | length }}", plugin)

    def test_private_attributes_render_empty(self, plugin):
        assert render_trim("[{{ config.__class__ }}]", plugin) == "[]"


class TestRemoteTimeout:
    def test_uses_configured_timeout(self, monkeypatch, plugin):
        seen = {}

        def fake_get(url, **kwargs):
            seen.update(kwargs)
            return httpx.Response(200, text="ok", request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx, "get", fake_get)
        plugin = replace(plugin, config=plugin.config.model_copy(update={"timeout": 4.5}))
        assert render_trim("https://example.com/t.j2", plugin) == "ok"
        assert seen["timeout"] == 4.5
