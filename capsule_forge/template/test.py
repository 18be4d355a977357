"""Unit tests for the template engine."""

import pytest

from capsule_forge.errors import ErrorCode, TemplateSyntaxError
from capsule_forge.mid import Theme
from capsule_forge.platform import Platform
from capsule_forge.schema import CapsuleDefinition
from capsule_forge.template import (
    LiteralSegment,
    Placeholder,
    RenderContext,
    TemplateKind,
    compile_platform_template,
    parse_template,
)


class TestParseTemplate:
    """Tests for tokenization."""

    @pytest.mark.unit
    def test_tokens_in_order(self):
        """Literal segments and placeholders alternate in source order."""
        compiled = parse_template(
            "struct {% component %}: View { let t = {%props.title%} }",
            declared_props=["title"],
        )
        assert compiled.tokens == (
            LiteralSegment("struct "),
            Placeholder("component", (), 1, 8),
            LiteralSegment(": View { let t = "),
            Placeholder("props", ("title",), 1, 40),
            LiteralSegment(" }"),
        )

    @pytest.mark.unit
    def test_escaped_open(self):
        """{%% renders a literal {%."""
        compiled = parse_template("a {%% b")
        assert compiled.tokens == (LiteralSegment("a {% b"),)

    @pytest.mark.unit
    def test_no_placeholders(self):
        """Plain text is a single literal."""
        assert parse_template("plain").placeholders() == []

    @pytest.mark.unit
    def test_references(self):
        """references() lists sub-paths per namespace."""
        compiled = parse_template(
            "{% theme.colors.primary %} {% theme.spacing %}",
        )
        assert compiled.references("theme") == {"colors.primary", "spacing"}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source,message",
        [
            ("abc {% component", "Unterminated"),
            ("{%   %}", "Empty"),
            ("{% a {% b %}", "Nested"),
            ("{% props..x %}", "Invalid placeholder path"),
            ("{% 1abc %}", "Invalid placeholder path"),
            ("{% secrets.key %}", "Unknown namespace"),
            ("{% props.missing %}", "Undeclared prop"),
            ("{% children %}", "only available in usage"),
            ("{% slot.footer %}", "only available in usage"),
            ("{% props %}", "only available in usage"),
            ("{% capsule.version %}", "Unknown capsule field"),
        ],
    )
    def test_malformed_component_templates(self, source, message):
        """Malformed placeholders are rejected with a message."""
        with pytest.raises(TemplateSyntaxError) as excinfo:
            parse_template(source, TemplateKind.COMPONENT, declared_props=["title"])
        assert message in excinfo.value.message

    @pytest.mark.unit
    def test_error_position(self):
        """Errors report line and column of the opening delimiter."""
        with pytest.raises(TemplateSyntaxError) as excinfo:
            parse_template("line one\n  {% nope.x %}")
        assert (excinfo.value.line, excinfo.value.column) == (2, 3)

    @pytest.mark.unit
    def test_undeclared_slot_in_usage(self):
        """Slots must be declared to be referenced."""
        with pytest.raises(TemplateSyntaxError):
            parse_template("{% slot.body %}", TemplateKind.USAGE, declared_slots=["footer"])
        parse_template("{% slot.footer %}", TemplateKind.USAGE, declared_slots=["footer"])

    @pytest.mark.unit
    def test_file_name_namespaces(self):
        """File name templates only see component and capsule."""
        parse_template("{% capsule.name %}View", TemplateKind.FILE_NAME)
        with pytest.raises(TemplateSyntaxError):
            parse_template("{% theme.spacing %}", TemplateKind.FILE_NAME)


class TestRender:
    """Tests for rendering."""

    @pytest.mark.unit
    def test_render_substitutes_values(self):
        """Placeholders are replaced from the context."""
        compiled = parse_template(
            "<{% component %} {% props %}>{% children %}</{% component %}>",
            TemplateKind.USAGE,
        )
        ctx = RenderContext(
            platform=Platform.WEB,
            component="Card",
            props_list='title="Hi"',
            children="<Text />",
        )
        assert compiled.render(ctx) == '<Card title="Hi"><Text /></Card>'

    @pytest.mark.unit
    def test_missing_prop_renders_null(self):
        """Props without a value render the dialect's null literal."""
        compiled = parse_template("x = {% props.title %}", declared_props=["title"])
        assert compiled.render(RenderContext(platform=Platform.IOS)) == "x = nil"

    @pytest.mark.unit
    def test_theme_tokens(self):
        """Theme tokens serialize in the platform dialect."""
        compiled = parse_template("{% theme.colors.primary %} {% theme.spacing %}")
        ctx = RenderContext(platform=Platform.ANDROID, theme=Theme())
        assert compiled.render(ctx) == "Color(0xFF3B82F6) 16"

    @pytest.mark.unit
    def test_unresolved_theme_token_warns(self):
        """Unknown theme tokens render null and warn."""
        compiled = parse_template("{% theme.colors.brand %}")
        ctx = RenderContext(platform=Platform.WEB, theme=Theme(), capsule_id="card")
        assert compiled.render(ctx) == "null"
        assert len(ctx.warnings) == 1
        assert ctx.warnings[0].code == ErrorCode.UNRESOLVED_THEME_TOKEN

    @pytest.mark.unit
    def test_render_is_deterministic(self):
        """Identical inputs yield identical output."""
        compiled = parse_template("{% component %}-{% theme.radius %}")
        ctx = RenderContext(platform=Platform.WEB, component="A", theme=Theme())
        assert compiled.render(ctx) == compiled.render(ctx) == "A-8"


class TestCompilePlatformTemplate:
    """Tests for per-capsule compilation."""

    @pytest.mark.unit
    def test_compiles_all_templates(self):
        """Component, file name and usage templates are parsed."""
        definition = CapsuleDefinition.model_validate(
            {
                "id": "card",
                "name": "Card",
                "props": [{"name": "title", "type": "string"}, {"name": "footer", "type": "slot"}],
                "platforms": {
                    "web": {
                        "code": "export function {% component %}() {}",
                        "usageTemplate": "<{% component %} {% props %}>{% slot.footer %}</{% component %}>",
                        "dependencies": ["react"],
                    }
                },
            }
        )
        compiled = compile_platform_template(definition, Platform.WEB)
        assert compiled.platform == Platform.WEB
        assert compiled.usage is not None
        assert compiled.dependencies == ("react",)
        assert compiled.file_name.references("component") == {""}
