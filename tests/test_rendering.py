"""
Tests for the Jinja2 backend and single-template rendering.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mavenplate.core.errors import OutputWriteError, RenderFailedError
from mavenplate.core.models import TemplateConfig
from mavenplate.rendering.engine import JinjaRenderer, load_template_text, render_one
from mavenplate.rendering.model import build_model


class TestJinjaRenderer:
    def test_camel_and_snake_names(self, annotation_artifact):
        model = build_model(annotation_artifact)
        text = "{{ Model.packageId }}|{{ Model.package_id }}|{{ Model.displayName }}"
        assert JinjaRenderer().render(text, model) == (
            "Xamarin.AndroidX.Annotation|Xamarin.AndroidX.Annotation|annotation"
        )

    def test_metadata(self, annotation_artifact):
        artifact = annotation_artifact.model_copy(update={"metadata": {"license": "MIT"}})
        text = "{{ Model.metadata.license }}"
        assert JinjaRenderer().render(text, build_model(artifact)) == "MIT"

    def test_keeps_trailing_newline(self, annotation_artifact):
        text = "{{ Model.version }}\n"
        assert JinjaRenderer().render(text, build_model(annotation_artifact)) == "1.0.2\n"

    def test_reuses_compiled_templates(self, annotation_artifact):
        renderer = JinjaRenderer()
        model = build_model(annotation_artifact)
        renderer.render("{{ Model.version }}", model)
        renderer.render("{{ Model.version }}", model)
        assert len(renderer._compiled) == 1


class TestLoadTemplateText:
    def test_inline(self, tmp_path):
        template = TemplateConfig(template_text="inline", output_pattern="out.txt")
        assert load_template_text(template, tmp_path) == "inline"

    def test_empty_inline(self, tmp_path):
        template = TemplateConfig(template_text="", output_pattern="out.txt")
        assert load_template_text(template, tmp_path) == ""

    def test_relative_file_resolves_against_base_path(self, tmp_path):
        (tmp_path / "t.j2").write_text("from file")
        template = TemplateConfig(template_file=Path("t.j2"), output_pattern="out.txt")
        assert load_template_text(template, tmp_path) == "from file"

    def test_missing_file(self, tmp_path):
        template = TemplateConfig(template_file=Path("nope.j2"), output_pattern="out.txt")
        with pytest.raises(FileNotFoundError):
            load_template_text(template, tmp_path)


class TestRenderOne:
    def test_writes_output(self, root_dir, create_template, annotation_artifact):
        template = TemplateConfig(
            template_file=create_template("<Id>{{ Model.packageId }}</Id>"),
            output_pattern="generated/{artifactid}.csproj",
        )

        path = render_one(
            template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
        )

        assert path == root_dir / "generated" / "annotation.csproj"
        assert path.read_text() == "<Id>Xamarin.AndroidX.Annotation</Id>"

    def test_overwrites_existing_output(self, root_dir, annotation_artifact):
        target = root_dir / "annotation.txt"
        target.write_text("stale content that is longer")
        template = TemplateConfig(
            template_text="{{ Model.artifactId }}", output_pattern="{artifactid}.txt"
        )

        render_one(
            template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
        )

        assert target.read_text() == "annotation"

    def test_unknown_field_fails(self, root_dir, annotation_artifact):
        template = TemplateConfig(
            template_text="{{ Model.nugetVersion }}", output_pattern="out.txt"
        )

        with pytest.raises(RenderFailedError) as exc_info:
            render_one(
                template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
            )

        assert exc_info.value.template == "<inline:out.txt>"
        assert exc_info.value.coordinate.key == annotation_artifact.key
        assert not (root_dir / "out.txt").exists()

    def test_syntax_error_fails(self, root_dir, annotation_artifact):
        template = TemplateConfig(template_text="{{ Model.packageId ", output_pattern="out.txt")
        with pytest.raises(RenderFailedError, match="TemplateSyntaxError"):
            render_one(
                template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
            )

    def test_missing_template_file_fails(self, root_dir, annotation_artifact):
        template = TemplateConfig(template_file=Path("missing.j2"), output_pattern="out.txt")
        with pytest.raises(RenderFailedError, match="Template not found"):
            render_one(
                template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
            )

    def test_custom_backend_errors_are_wrapped(self, root_dir, annotation_artifact):
        class Broken:
            def render(self, template_text, model):
                raise RuntimeError("backend exploded")

        template = TemplateConfig(template_text="x", output_pattern="out.txt")
        with pytest.raises(RenderFailedError, match="backend exploded"):
            render_one(template, build_model(annotation_artifact), annotation_artifact, root_dir, Broken())

    def test_unencodable_output(self, root_dir, annotation_artifact):
        class LoneSurrogate:
            def render(self, template_text, model):
                return "bad \ud800 text"

        template = TemplateConfig(template_text="x", output_pattern="out.txt")

        with pytest.raises(OutputWriteError):
            render_one(
                template, build_model(annotation_artifact), annotation_artifact, root_dir, LoneSurrogate()
            )
        assert list(root_dir.iterdir()) == []

    def test_unwritable_output(self, root_dir, annotation_artifact):
        (root_dir / "blocker").write_text("a file, not a directory")
        template = TemplateConfig(template_text="x", output_pattern="blocker/out.txt")

        with pytest.raises(OutputWriteError):
            render_one(
                template, build_model(annotation_artifact), annotation_artifact, root_dir, JinjaRenderer()
            )
