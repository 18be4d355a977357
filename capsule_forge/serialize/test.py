"""Unit tests for literal serialization and identifiers."""

import pytest

from capsule_forge.errors import ErrorCode, SerializationError
from capsule_forge.platform import Dialect, Platform
from capsule_forge.schema import PropSpec, PropType
from capsule_forge.serialize import (
    Casing,
    IdentifierScope,
    derive_identifier,
    dialect_for,
    get_dialect,
    serialize,
    serialize_prop,
    split_words,
)

WEB, IOS, ANDROID = Platform.WEB, Platform.IOS, Platform.ANDROID


# =============================================================================
# Identifiers
# =============================================================================


class TestDeriveIdentifier:
    """Tests for derive_identifier."""

    @pytest.mark.unit
    def test_split_words(self):
        """Punctuation and case boundaries split words."""
        assert split_words("My Button!") == ["My", "Button"]
        assert split_words("dataTable2") == ["data", "Table", "2"]
        assert split_words("QRCode") == ["QR", "Code"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "casing,expected",
        [
            (Casing.PASCAL, "MyButton"),
            (Casing.CAMEL, "myButton"),
            (Casing.SNAKE, "my_button"),
            (Casing.KEBAB, "my-button"),
        ],
    )
    def test_casings(self, casing, expected):
        """'My Button!' sanitizes under each casing."""
        assert derive_identifier("My Button!", casing) == expected

    @pytest.mark.unit
    def test_leading_digit_prefixed(self):
        """Identifiers never start with a digit."""
        assert derive_identifier("2fa screen") == "_2FaScreen"

    @pytest.mark.unit
    def test_accents_folded(self):
        """Accented letters fold to ASCII."""
        assert derive_identifier("Botón Café") == "BotonCafe"

    @pytest.mark.unit
    def test_nothing_usable(self):
        """Pure punctuation yields an empty identifier."""
        assert derive_identifier("!!!") == ""


class TestIdentifierScope:
    """Tests for IdentifierScope disambiguation."""

    @pytest.mark.unit
    def test_numeric_suffixes_in_first_seen_order(self):
        """Colliding names resolve to Name, Name2, Name3."""
        scope = IdentifierScope("components")
        assert scope.claim("Name", key="a") == "Name"
        assert scope.claim("Name", key="b") == "Name2"
        assert scope.claim("name!", key="c") == "Name3"

    @pytest.mark.unit
    def test_same_key_returns_same_identifier(self):
        """Repeated claims are stable."""
        scope = IdentifierScope()
        first = scope.claim("Button")
        assert scope.claim("Button") == first
        assert scope.claimed() == {"Button": "Button"}

    @pytest.mark.unit
    def test_reserved_names_skipped(self):
        """Reserved names are never handed out."""
        scope = IdentifierScope(casing=Casing.CAMEL, reserved={"class"})
        assert scope.claim("class") == "class2"

    @pytest.mark.unit
    def test_case_insensitive_collision(self):
        """Names differing only in case collide."""
        scope = IdentifierScope()
        assert scope.claim("Button", key="x") == "Button"
        scope.reserve("App")
        assert scope.claim("app", key="y") == "App2"

    @pytest.mark.unit
    def test_uuid_fallback_when_suffixes_exhausted(self):
        """Exhausted suffixes fall back to a deterministic UUID5 suffix."""
        scope = IdentifierScope("s", max_suffix=2)
        scope.claim("Name", key="a")
        scope.claim("Name", key="b")
        fallback = scope.claim("Name", key="c")
        assert fallback.startswith("Name_")
        assert len(scope.warnings) == 1
        assert scope.warnings[0].code == ErrorCode.IDENTIFIER_COLLISION

        again = IdentifierScope("s", max_suffix=2)
        again.claim("Name", key="a")
        again.claim("Name", key="b")
        assert again.claim("Name", key="c") == fallback

    @pytest.mark.unit
    def test_uuid_fallback_for_empty_name(self):
        """Names with no identifier characters fall back too."""
        scope = IdentifierScope()
        ident = scope.claim("???")
        assert ident.startswith("Identifier_")
        assert scope.warnings


# =============================================================================
# Strings
# =============================================================================


class TestStrings:
    """Tests for string escaping per dialect."""

    @pytest.mark.unit
    def test_typescript_escapes(self):
        """TS escapes quotes, backslashes, newlines and line separators."""
        text = 'say "hi"\\\n\u2028\x01'
        assert serialize(text, PropType.STRING, WEB) == (
            '"say \\"hi\\"\\\\\\n\\u2028\\u0001"'
        )

    @pytest.mark.unit
    def test_swift_interpolation_neutralized(self):
        """A literal backslash-paren cannot start Swift interpolation."""
        assert serialize("\\(x)", PropType.STRING, IOS) == '"\\\\(x)"'
        assert serialize("a\0b\x1b", PropType.STRING, IOS) == '"a\\0b\\u{1b}"'

    @pytest.mark.unit
    def test_kotlin_dollar_escaped(self):
        """Kotlin template expressions are escaped."""
        assert serialize("${user}", PropType.STRING, ANDROID) == '"\\${user}"'
        assert serialize("\b", PropType.STRING, ANDROID) == '"\\b"'

    @pytest.mark.unit
    def test_rust_escapes(self):
        """Rust uses braced unicode escapes."""
        rust = get_dialect(Dialect.RUST)
        assert rust.string('a"\x07') == '"a\\"\\u{7}"'


# =============================================================================
# Scalars and collections
# =============================================================================


class TestScalars:
    """Tests for numbers, booleans and null."""

    @pytest.mark.unit
    def test_null_literals(self):
        """Each dialect spells null its own way."""
        assert serialize(None, PropType.STRING, WEB) == "null"
        assert serialize(None, PropType.STRING, IOS) == "nil"
        assert serialize(None, PropType.STRING, ANDROID) == "null"
        assert get_dialect(Dialect.RUST).serialize(None, PropType.STRING) == "None"

    @pytest.mark.unit
    def test_numbers(self):
        """Integers and floats render as literals."""
        assert serialize(42, PropType.NUMBER, IOS) == "42"
        assert serialize(1.5, PropType.NUMBER, WEB) == "1.5"
        assert serialize(3_000_000_000, PropType.NUMBER, ANDROID) == "3000000000L"

    @pytest.mark.unit
    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), True])
    def test_bad_numbers_rejected(self, bad):
        """NaN, infinity and booleans are not numbers."""
        with pytest.raises(SerializationError):
            serialize(bad, PropType.NUMBER, WEB)

    @pytest.mark.unit
    def test_booleans(self):
        """Booleans are lowercase in every dialect."""
        assert serialize(True, PropType.BOOLEAN, IOS) == "true"
        assert serialize(False, PropType.BOOLEAN, ANDROID) == "false"


class TestCollections:
    """Tests for array and object literals."""

    @pytest.mark.unit
    def test_arrays(self):
        """Sequences use native literal syntax."""
        values = ["google", "apple"]
        assert serialize(values, PropType.ARRAY, WEB) == '["google", "apple"]'
        assert serialize(values, PropType.ARRAY, IOS) == '["google", "apple"]'
        assert serialize(values, PropType.ARRAY, ANDROID) == (
            'listOf("google", "apple")'
        )
        rust = get_dialect(Dialect.RUST)
        assert rust.serialize(values, PropType.ARRAY) == 'vec!["google", "apple"]'

    @pytest.mark.unit
    def test_objects(self):
        """Maps use native literal syntax; TS quotes non-identifier keys."""
        value = {"key": 1, "a-b": True}
        assert serialize(value, PropType.OBJECT, WEB) == '{ key: 1, "a-b": true }'
        assert serialize(value, PropType.OBJECT, IOS) == '["key": 1, "a-b": true]'
        assert serialize(value, PropType.OBJECT, ANDROID) == (
            'mapOf("key" to 1, "a-b" to true)'
        )
        rust = get_dialect(Dialect.RUST)
        assert rust.serialize({"k": "v"}, PropType.OBJECT) == (
            'HashMap::from([("k", "v")])'
        )

    @pytest.mark.unit
    def test_empty_collections(self):
        """Empty maps have dedicated spellings."""
        assert serialize({}, PropType.OBJECT, IOS) == "[:]"
        assert serialize({}, PropType.OBJECT, WEB) == "{}"
        assert get_dialect(Dialect.RUST).serialize({}, PropType.OBJECT) == (
            "HashMap::new()"
        )

    @pytest.mark.unit
    def test_nested_values(self):
        """Nested values are serialized recursively."""
        value = [{"name": "Ada", "tags": ["x"]}]
        assert serialize(value, PropType.ARRAY, ANDROID) == (
            'listOf(mapOf("name" to "Ada", "tags" to listOf("x")))'
        )


# =============================================================================
# Domain values
# =============================================================================


class TestDomainValues:
    """Tests for enums, actions, colors and dimensions."""

    @pytest.mark.unit
    def test_enums(self):
        """Swift uses member syntax; the others quote the option."""
        assert serialize("login", PropType.ENUM, WEB) == '"login"'
        assert serialize("login", PropType.ENUM, IOS) == ".login"
        assert serialize("default", PropType.ENUM, IOS) == ".`default`"
        assert serialize("login", PropType.ENUM, ANDROID) == '"login"'

    @pytest.mark.unit
    def test_actions(self):
        """Actions are handler references, never inlined code."""
        assert serialize("onLogin", PropType.ACTION, WEB) == "handlers.onLogin"
        assert serialize("onLogin", PropType.ACTION, IOS) == "Handlers.onLogin"
        assert serialize("onLogin", PropType.ACTION, ANDROID) == "Handlers::onLogin"
        rust = get_dialect(Dialect.RUST)
        assert rust.serialize("onLogin", PropType.ACTION) == "handlers::on_login"

    @pytest.mark.unit
    def test_action_names_sanitized(self):
        """Executable-looking action text becomes a plain identifier."""
        assert serialize("alert('x'); go()", PropType.ACTION, WEB) == (
            "handlers.alertXGo"
        )

    @pytest.mark.unit
    def test_claimed_handler_names(self):
        """Action names that sanitize alike resolve to distinct handlers."""
        ts = dialect_for(WEB)
        scope = ts.handler_scope()
        assert [scope.claim(n) for n in ("onLogin", "on_login", "onLogin")] == [
            "onLogin",
            "onLogin2",
            "onLogin",
        ]
        assert scope.claim("delete") == "delete2"
        handlers = scope.claimed()
        assert ts.serialize("on_login", PropType.ACTION, handlers=handlers) == (
            "handlers.onLogin2"
        )
        assert ts.serialize(
            ["onLogin", "on_login"], PropType.ARRAY, PropType.ACTION, handlers=handlers
        ) == "[handlers.onLogin, handlers.onLogin2]"

    @pytest.mark.unit
    def test_hex_colors(self):
        """Hex colors use each platform's color constructor."""
        assert serialize("#3b82f6", PropType.COLOR, WEB) == '"#3b82f6"'
        assert serialize("#3B82F6", PropType.COLOR, ANDROID) == "Color(0xFF3B82F6)"
        assert serialize("#fff", PropType.COLOR, IOS) == (
            "Color(red: 1.000, green: 1.000, blue: 1.000)"
        )
        assert serialize("#00000080", PropType.COLOR, ANDROID) == "Color(0x80000000)"

    @pytest.mark.unit
    def test_color_tokens(self):
        """Theme tokens reference generated theme constants."""
        assert serialize("primary", PropType.COLOR, WEB) == "theme.colors.primary"
        assert serialize("colors.primary", PropType.COLOR, IOS) == "Theme.primary"
        assert serialize("textPrimary", PropType.COLOR, ANDROID) == (
            "AppTheme.TextPrimary"
        )

    @pytest.mark.unit
    def test_dimensions(self):
        """Size and spacing keywords map to the shared scale."""
        assert serialize("md", PropType.SIZE, WEB) == "16"
        assert serialize("relaxed", PropType.SPACING, IOS) == "24"
        assert serialize("compact", PropType.SPACING, ANDROID) == "8.dp"
        assert serialize(12.5, PropType.SIZE, ANDROID) == "12.5.dp"

    @pytest.mark.unit
    def test_slot_has_no_literal(self):
        """Slots are not literals."""
        with pytest.raises(SerializationError):
            serialize([], PropType.SLOT, WEB)


class TestDispatch:
    """Tests for platform dispatch helpers."""

    @pytest.mark.unit
    def test_dialect_for_every_platform(self):
        """Every platform has a dialect; desktop UI shares TypeScript."""
        for platform in Platform:
            assert dialect_for(platform) is not None
        assert dialect_for(Platform.DESKTOP) is dialect_for(Platform.WEB)

    @pytest.mark.unit
    def test_serialize_prop_uses_item_type(self):
        """Array item types come from the PropSpec."""
        spec = PropSpec(name="modes", type=PropType.ARRAY, item_type=PropType.ENUM)
        assert serialize_prop(["a", "b"], spec, IOS) == "[.a, .b]"

    @pytest.mark.unit
    def test_jsx_attribute(self):
        """Safe strings are attributes; others are expressions."""
        ts = dialect_for(WEB)
        assert ts.jsx_attribute("title", "Welcome", PropType.STRING) == 'title="Welcome"'
        assert ts.jsx_attribute("title", 'a "b"', PropType.STRING) == (
            'title={"a \\"b\\""}'
        )
        assert ts.jsx_attribute("title", "{x}", PropType.STRING) == 'title={"{x}"}'
        assert ts.jsx_attribute("count", 3, PropType.NUMBER) == "count={3}"
