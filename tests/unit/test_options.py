#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for compile and serializer options."""
import pytest

from flavormark.exceptions import InvalidOptionsError
from flavormark.options import CompileOptions, MarkdownSerializerOptions, resolve_options


@pytest.mark.unit
class TestCompileOptionsDefaults:
    """Test default option values."""

    def test_defaults(self) -> None:
        """Test the documented defaults."""
        options = CompileOptions()

        assert options.line_break_mode == "hard"
        assert options.hard_breaks is True
        assert options.allow_dangerous_html is True
        assert options.sanitize is True
        assert options.max_toc_depth == 2
        assert options.custom_component_prefix == "x"
        assert options.normalize is True
        assert options.safe_mode is False
        assert options.copy_buttons is True
        assert options.disabled_constructs == frozenset()

    def test_frozen(self) -> None:
        """Test that options cannot be modified after construction."""
        options = CompileOptions()
        with pytest.raises(AttributeError):
            options.safe_mode = True  # type: ignore[misc]

    def test_variables_read_only(self) -> None:
        """Test that variable mappings are copied into read-only views."""
        source = {"user": "Ada"}
        options = CompileOptions(variables=source)
        source["user"] = "Grace"

        assert options.variables["user"] == "Ada"
        with pytest.raises(TypeError):
            options.variables["user"] = "Grace"  # type: ignore[index]

    def test_create_updated(self) -> None:
        """Test copying options with changes."""
        options = CompileOptions().create_updated(max_toc_depth=4, disabled_constructs={"strong"})

        assert options.max_toc_depth == 4
        assert options.disabled_constructs == frozenset({"emphasis"})

    def test_create_updated_unknown_field(self) -> None:
        """Test that unknown fields are rejected."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions().create_updated(colour="red")


@pytest.mark.unit
class TestCompileOptionsValidation:
    """Test validation of option values."""

    @pytest.mark.parametrize("depth", [0, 7, -1, True, "2", 2.5])
    def test_invalid_max_toc_depth(self, depth) -> None:
        """Test that max_toc_depth must be an integer from 1 to 6."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            CompileOptions(max_toc_depth=depth)
        assert exc_info.value.invalid_options == ("max_toc_depth",)

    @pytest.mark.parametrize("depth", [1, 6])
    def test_max_toc_depth_bounds(self, depth: int) -> None:
        """Test that the bounds themselves are accepted."""
        assert CompileOptions(max_toc_depth=depth).max_toc_depth == depth

    def test_invalid_line_break_mode(self) -> None:
        """Test that only hard and soft are accepted."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions(line_break_mode="medium")  # type: ignore[arg-type]

    @pytest.mark.parametrize("prefix", ["X", "", "1x", "x-y"])
    def test_invalid_component_prefix(self, prefix: str) -> None:
        """Test that component prefixes must be lowercase identifiers."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions(custom_component_prefix=prefix)

    def test_invalid_markdown_options(self) -> None:
        """Test that markdown must be a serializer options instance."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions(markdown={"bullet_symbol": "-"})  # type: ignore[arg-type]

    def test_construct_aliases_normalized(self) -> None:
        """Test that alternate construct spellings are canonicalized."""
        options = CompileOptions(disabled_constructs=frozenset({"fencedCode", "deletion"}))
        assert options.disabled_constructs == frozenset({"fenced_code", "strikethrough"})


@pytest.mark.unit
class TestCompileOptionsFromDict:
    """Test building options from mappings."""

    def test_camel_case_keys(self) -> None:
        """Test that external camelCase names are accepted."""
        options = CompileOptions.from_dict(
            {"lineBreakMode": "soft", "maxTOCDepth": 3, "safeMode": True, "disableTokenizers": ["fencedCode"]}
        )

        assert options.line_break_mode == "soft"
        assert options.max_toc_depth == 3
        assert options.safe_mode is True
        assert options.disabled_constructs == frozenset({"fenced_code"})

    def test_unknown_key(self) -> None:
        """Test that unknown keys are rejected."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            CompileOptions.from_dict({"bogus": 1})
        assert exc_info.value.invalid_options == ("bogus",)

    def test_conflicting_aliases(self) -> None:
        """Test that an option given twice with different values is rejected."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions.from_dict({"maxTOCDepth": 3, "max_toc_depth": 4})

    def test_matching_aliases(self) -> None:
        """Test that an option given twice with the same value is accepted."""
        assert CompileOptions.from_dict({"maxTOCDepth": 3, "max_toc_depth": 3}).max_toc_depth == 3

    @pytest.mark.parametrize("value,expected", [(True, "soft"), (False, "hard")])
    def test_correctnewlines(self, value: bool, expected: str) -> None:
        """Test that correctnewlines is the inverse of hard line breaks."""
        assert CompileOptions.from_dict({"correctnewlines": value}).line_break_mode == expected

    def test_correctnewlines_contradiction(self) -> None:
        """Test that correctnewlines cannot contradict lineBreakMode."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            CompileOptions.from_dict({"correctnewlines": True, "lineBreakMode": "hard"})
        assert "correctnewlines" in exc_info.value.invalid_options

    def test_correctnewlines_agreement(self) -> None:
        """Test that agreeing values are accepted."""
        options = CompileOptions.from_dict({"correctnewlines": False, "lineBreakMode": "hard"})
        assert options.line_break_mode == "hard"

    def test_nested_markdown_options(self) -> None:
        """Test that serializer options may be given as a mapping."""
        options = CompileOptions.from_dict({"markdown": {"bullet_symbol": "-", "emphasis_symbol": "_"}})
        assert options.markdown == MarkdownSerializerOptions(bullet_symbol="-", emphasis_symbol="_")

    def test_nested_markdown_unknown_key(self) -> None:
        """Test that unknown serializer option keys are rejected."""
        with pytest.raises(InvalidOptionsError):
            CompileOptions.from_dict({"markdown": {"bullets": "-"}})


@pytest.mark.unit
class TestResolveOptions:
    """Test coercion of option arguments."""

    def test_none(self) -> None:
        """Test that None gives defaults."""
        assert resolve_options(None) == CompileOptions()

    def test_instance_passed_through(self) -> None:
        """Test that instances are returned as they are."""
        options = CompileOptions(safe_mode=True)
        assert resolve_options(options) is options

    def test_mapping(self) -> None:
        """Test that mappings go through from_dict."""
        assert resolve_options({"safeMode": True}).safe_mode is True

    def test_other_types_rejected(self) -> None:
        """Test that other argument types are rejected."""
        with pytest.raises(InvalidOptionsError):
            resolve_options(42)  # type: ignore[arg-type]


@pytest.mark.unit
class TestMarkdownSerializerOptions:
    """Test reverse compiler options."""

    def test_defaults(self) -> None:
        """Test the default formatting choices."""
        options = MarkdownSerializerOptions()

        assert options.emphasis_symbol == "*"
        assert options.bullet_symbol == "*"
        assert options.code_fence_char == "`"
        assert options.thematic_break == "---"
        assert options.emit_frontmatter is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"emphasis_symbol": "+"},
            {"bullet_symbol": "#"},
            {"code_fence_char": "'"},
            {"thematic_break": "==="},
        ],
    )
    def test_invalid_choices(self, kwargs) -> None:
        """Test that unsupported symbols are rejected."""
        with pytest.raises(InvalidOptionsError):
            MarkdownSerializerOptions(**kwargs)
