"""Shared fixtures for docwright tests."""

from collections.abc import Callable
from typing import Any

import pytest

from docwright.analysis.index import IndexedReference, IndexedSymbol, SymbolIndex
from docwright.core.models import ApiContext, CallSiteInfo, DocumentationStatus, SymbolKind

PROGRAM_SOURCE = """\
using Lib;

var calc = new Calculator();
var sum = calc.Add(1, 2);
Console.WriteLine(sum);

var total = calc.Add(sum, 10);
Console.WriteLine(total);
"""

CALCULATOR_SOURCE = """\
namespace Lib;

public class Calculator
{
    public int Add(int a, int b)
    {
        Validate(a);
        return a + b;
    }
}
"""


@pytest.fixture
def symbol_index() -> SymbolIndex:
    """A small in-memory project: a calculator and a program using it."""
    return SymbolIndex(
        symbols=[
            IndexedSymbol(
                fully_qualified_name="Lib.Calculator.Add",
                kind=SymbolKind.METHOD,
                file_path="Calculator.cs",
                line_number=5,
                signature="public int Add(int a, int b)",
                parameters=["int a", "int b"],
                return_type="int",
                hierarchy=["Lib.CalculatorBase", "Lib.ICalculator"],
                implementation="Validate(a);\nreturn a + b;",
                calls=["Lib.Calculator.Validate", "System.Math.Abs"],
            ),
            IndexedSymbol(
                fully_qualified_name="Lib.Calculator.Validate",
                file_path="Calculator.cs",
                line_number=12,
                signature="private void Validate(int value)",
                access_modifier="private",
                parameters=["int value"],
                documentation="<summary>Ensures the value is within range.</summary>",
                documentation_status=DocumentationStatus.DOCUMENTED,
            ),
            IndexedSymbol(
                fully_qualified_name="Lib.Calculator.Reset",
                file_path="Calculator.cs",
                line_number=20,
                signature="public void Reset()",
                documentation_status=DocumentationStatus.PARTIALLY_DOCUMENTED,
            ),
        ],
        references=[
            IndexedReference(symbol="Lib.Calculator.Add", file_path="Program.cs", line_number=4),
            IndexedReference(symbol="Lib.Calculator.Add", file_path="Program.cs", line_number=7),
        ],
        sources={
            "Program.cs": PROGRAM_SOURCE,
            "Calculator.cs": CALCULATOR_SOURCE,
        },
    )


@pytest.fixture
def make_context() -> Callable[..., ApiContext]:
    """Factory for ApiContext objects with sensible defaults."""

    def _make(**overrides: Any) -> ApiContext:
        values: dict[str, Any] = {
            "api_symbol_id": "Lib.Calculator.Add",
            "signature": "public int Add(int a, int b)",
            "parameter_types": ["int a", "int b"],
            "return_type": "int",
            "token_estimate": 120,
        }
        values.update(overrides)
        return ApiContext(**values)

    return _make


@pytest.fixture
def call_site() -> CallSiteInfo:
    return CallSiteInfo(
        file_path="Program.cs",
        line_number=4,
        call_expression="var sum = calc.Add(1, 2);",
        context_before=["var calc = new Calculator();"],
        context_after=["Console.WriteLine(sum);"],
    )
