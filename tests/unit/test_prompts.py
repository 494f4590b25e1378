"""Tests for prompt rendering."""

from dataclasses import replace

from docwright.core.models import CalledMethodDoc, CallSiteInfo
from docwright.generator.prompts import build_documentation_prompt, get_system_prompt


class TestDocumentationPrompt:
    """Tests for build_documentation_prompt."""

    def test_always_includes_signature_and_contract(self, make_context) -> None:
        """Test the fixed parts of the prompt."""
        prompt = build_documentation_prompt(make_context(parameter_types=[], return_type=None))

        assert "Signature: public int Add(int a, int b)" in prompt
        assert "Symbol ID: Lib.Calculator.Add" in prompt
        assert "Output Format:" in prompt
        assert "<summary> tag (required)" in prompt
        assert "Style Guidelines:" in prompt
        assert "Examples of Good Documentation:" in prompt

    def test_parameters_and_return_type(self, make_context) -> None:
        """Test the parameter list and return type line."""
        prompt = build_documentation_prompt(make_context())

        assert "Parameters:\n  - int a\n  - int b\n" in prompt
        assert "Return Type: int" in prompt

    def test_optional_sections_omitted_when_empty(self, make_context) -> None:
        """Test that empty sections are not rendered."""
        prompt = build_documentation_prompt(make_context(parameter_types=[], return_type=None))

        assert "Parameters:" not in prompt
        assert "Return Type:" not in prompt
        assert "Implementation:" not in prompt
        assert "Type Relationships:" not in prompt
        assert "Related types:" not in prompt
        assert "Usage Examples:" not in prompt
        assert "Called Methods Documentation:" not in prompt

    def test_hierarchy_rendered_as_chain(self, make_context) -> None:
        """Test the inheritance arrow chain."""
        prompt = build_documentation_prompt(
            make_context(inheritance_hierarchy=["Lib.Base", "Lib.Root", "Lib.IThing"])
        )

        assert "Inheritance hierarchy: Lib.Base -> Lib.Root -> Lib.IThing" in prompt

    def test_related_types_up_to_ten(self, make_context) -> None:
        """Test that ten related types are still listed."""
        types = [f"Type{i}" for i in range(10)]
        prompt = build_documentation_prompt(make_context(related_types=types))

        assert "Related types: Type0, Type1" in prompt

    def test_related_types_over_ten_omitted(self, make_context) -> None:
        """Large related-type sets are noise and left out."""
        types = [f"Type{i}" for i in range(11)]
        prompt = build_documentation_prompt(make_context(related_types=types))

        assert "Related types:" not in prompt

    def test_implementation_with_truncation_note(self, make_context) -> None:
        """Test the implementation section and its truncation note."""
        prompt = build_documentation_prompt(
            make_context(implementation_body="return a + b;", is_implementation_truncated=True)
        )

        assert "Implementation:\n" in prompt
        assert "return a + b;" in prompt
        assert "(Implementation truncated for token budget)" in prompt

    def test_called_methods_documentation(self, make_context) -> None:
        """Test that callee documentation is quoted."""
        prompt = build_documentation_prompt(
            make_context(
                called_methods_documentation=[
                    CalledMethodDoc("Lib.Calculator.Validate", "<summary>Checks range.</summary>")
                ]
            )
        )

        assert "This method calls `Lib.Calculator.Validate` which is documented as:" in prompt
        assert "<summary>Checks range.</summary>" in prompt

    def test_at_most_three_examples(self, make_context, call_site: CallSiteInfo) -> None:
        """Only the first three usage examples are rendered."""
        sites = [replace(call_site, line_number=n) for n in (4, 14, 24, 34, 44)]
        prompt = build_documentation_prompt(make_context(call_sites=sites))

        assert "Example 1 (Program.cs:4):" in prompt
        assert "Example 3 (Program.cs:24):" in prompt
        assert "Example 4" not in prompt
        assert "Program.cs:34" not in prompt

    def test_example_includes_context_lines(self, make_context, call_site: CallSiteInfo) -> None:
        """Test that context lines surround the call expression."""
        prompt = build_documentation_prompt(make_context(call_sites=[call_site]))

        assert (
            "  var calc = new Calculator();\n"
            "  var sum = calc.Add(1, 2);\n"
            "  Console.WriteLine(sum);\n"
        ) in prompt

    def test_xml_is_not_escaped(self, make_context) -> None:
        """Prompts are plain text; angle brackets survive rendering."""
        prompt = build_documentation_prompt(make_context(return_type="List<int>"))

        assert "Return Type: List<int>" in prompt
        assert "<param name=\"input\">" in prompt

    def test_rendering_is_pure(self, make_context) -> None:
        """Test that the same context always renders the same prompt."""
        context = make_context(related_types=["int"])

        assert build_documentation_prompt(context) == build_documentation_prompt(context)


class TestSystemPrompt:
    def test_system_prompt(self) -> None:
        prompt = get_system_prompt()

        assert "XML documentation" in prompt
        assert prompt == prompt.strip()
