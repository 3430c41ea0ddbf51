"""Tests for the calculator tool."""
import pytest

from calculator.tools.calculator import calculator, get_engine


@pytest.fixture(autouse=True)
def reset_engine():
    """Reset the shared tool engine between tests."""
    engine = get_engine()
    engine.last_answer = 0.0
    yield
    engine.last_answer = 0.0


def test_calculator_tool_evaluates():
    """Test successful tool calls."""
    assert calculator.name == "calculator"
    assert calculator.invoke({"expression": "2+3*4"}) == "14.0"
    assert calculator.invoke({"expression": "  sqrt(16) "}) == "4.0"


def test_calculator_tool_commits_answer():
    """Test that results are stored for ans."""
    calculator.invoke({"expression": "20+1"})
    assert calculator.invoke({"expression": "ans*2"}) == "42.0"


def test_calculator_tool_raises_on_error():
    """Test that evaluation errors surface as ValueError."""
    with pytest.raises(ValueError, match="division by zero"):
        calculator.invoke({"expression": "1/0"})
    assert get_engine().last_answer == 0.0
