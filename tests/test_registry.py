"""Tests for the identifier registry."""
import math

import pytest

from calculator.common.types import AngleMode, ParseError
from calculator.core.lexer import tokenize
from calculator.core.parser import parse_expression
from calculator.core.registry import (
    DEFAULT_REGISTRY,
    Constant,
    IdentifierRegistry,
    RegistryError,
    UnaryFunction,
    create_default_registry,
)


@pytest.fixture
def registry():
    """Create a registry with the built-ins plus a custom function."""
    registry = create_default_registry()
    registry.register_function(UnaryFunction(
        name="cube",
        func=lambda x: x ** 3,
        description="Cube"
    ))
    registry.register_constant(Constant(name="tau", value=2 * math.pi, description="Full turn"))
    return registry


def test_default_registry_contents():
    """Test built-in identifiers and their categories."""
    assert set(DEFAULT_REGISTRY.get_by_category("constant")) == {"pi", "e"}
    assert set(DEFAULT_REGISTRY.get_by_category("function")) == {"sqrt", "sin", "cos", "tan", "log", "ln"}
    assert DEFAULT_REGISTRY.metadata["ln"].kind == "function"
    assert DEFAULT_REGISTRY.metadata["pi"].kind == "constant"


def test_lookup_is_case_insensitive():
    """Test case-insensitive lookup."""
    assert DEFAULT_REGISTRY.lookup("PI").value == math.pi
    assert DEFAULT_REGISTRY.lookup("Sin").name == "sin"
    assert DEFAULT_REGISTRY.lookup("nope") is None


def test_register_rejects_duplicates_and_reserved_names(registry):
    """Test registration validation."""
    with pytest.raises(RegistryError, match="already registered"):
        registry.register_constant(Constant(name="PI", value=3.0))
    with pytest.raises(RegistryError, match="reserved"):
        registry.register_constant(Constant(name="Ans", value=1.0))
    with pytest.raises(RegistryError, match="alphabetic"):
        registry.register_function(UnaryFunction(name="f2", func=abs))


def test_custom_identifiers_in_expressions(registry):
    """Test that registered identifiers are usable by the parser."""
    assert parse_expression(tokenize("cube(3)"), registry=registry) == 27.0
    assert parse_expression(tokenize("TAU/2"), registry=registry) == math.pi

    # Not visible through the default registry
    with pytest.raises(ParseError, match="unknown identifier: cube"):
        parse_expression(tokenize("cube(3)"))


def test_unary_function_apply():
    """Test domain checks and angle conversion."""
    sin = DEFAULT_REGISTRY.lookup("sin")
    assert sin.apply(90, AngleMode.DEGREES) == pytest.approx(1.0)
    assert sin.apply(math.pi / 2, AngleMode.RADIANS) == pytest.approx(1.0)
    assert math.isnan(sin.apply(math.inf, AngleMode.RADIANS))

    log = DEFAULT_REGISTRY.lookup("log")
    with pytest.raises(ParseError, match="log domain error"):
        log.apply(0.0, AngleMode.DEGREES)
    # Angle mode does not affect non-angular functions
    assert log.apply(1000, AngleMode.DEGREES) == pytest.approx(3.0)


def test_default_domain_error_message():
    """Test the message used when none is configured."""
    recip = UnaryFunction(name="recip", func=lambda x: 1 / x, rejects=lambda x: x == 0)
    with pytest.raises(ParseError, match="recip domain error"):
        recip.apply(0.0, AngleMode.RADIANS)
