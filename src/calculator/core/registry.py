"""Registry of named constants and functions available to expressions."""
import math
from typing import Callable, Dict, Literal, Optional, Set, Union

from pydantic import BaseModel, PrivateAttr

from ..common.types import AngleMode, ParseError
from .floatmath import ieee_sqrt, periodic

ANSWER_NAME = "ans"


class RegistryError(Exception):
    """Base error for registry operations."""
    pass


class Constant(BaseModel):
    """A named numeric constant."""
    name: str
    value: float
    description: str = ""


class UnaryFunction(BaseModel):
    """A single-argument function with an optional domain check."""
    name: str
    func: Callable[[float], float]
    description: str = ""
    # Returns True when the argument is outside the function's domain
    rejects: Optional[Callable[[float], bool]] = None
    domain_error: Optional[str] = None
    angular: bool = False

    def apply(self, argument: float, angle_mode: AngleMode) -> float:
        """Check the domain, convert angles if needed and call the function."""
        if self.rejects is not None and self.rejects(argument):
            raise ParseError(self.domain_error or f"{self.name} domain error")
        if self.angular and angle_mode == AngleMode.DEGREES:
            argument = math.radians(argument)
        return self.func(argument)


Identifier = Union[Constant, UnaryFunction]


class IdentifierMetadata(BaseModel):
    """Serializable identifier metadata."""
    name: str
    kind: Literal["constant", "function"]
    description: str


class IdentifierRegistry(BaseModel):
    """Registry managing identifier metadata and runtime definitions with categories."""
    metadata: Dict[str, IdentifierMetadata] = {}
    _instances: Dict[str, Identifier] = PrivateAttr(default_factory=dict)
    _categories: Dict[str, Set[str]] = PrivateAttr(default_factory=dict)

    def _validate_name(self, name: str) -> str:
        """Normalize a name and reject reserved or duplicate ones."""
        key = name.lower()
        if not key.isalpha():
            raise RegistryError(f"Identifier must be alphabetic: {name!r}")
        if key == ANSWER_NAME:
            raise RegistryError(f"'{ANSWER_NAME}' is a reserved identifier")
        if key in self.metadata:
            raise RegistryError(f"Identifier already registered: {key}")
        return key

    def _register(self, key: str, category: Literal["constant", "function"], item: Identifier) -> None:
        """Internal method to register an identifier."""
        self.metadata[key] = IdentifierMetadata(
            name=key,
            kind=category,
            description=item.description
        )
        self._categories.setdefault(category, set()).add(key)
        self._instances[key] = item

    def register_constant(self, constant: Constant) -> None:
        """Register a named constant."""
        key = self._validate_name(constant.name)
        self._register(key, "constant", constant)

    def register_function(self, function: UnaryFunction) -> None:
        """Register a single-argument function."""
        key = self._validate_name(function.name)
        self._register(key, "function", function)

    def lookup(self, name: str) -> Optional[Identifier]:
        """Find an identifier, ignoring case."""
        return self._instances.get(name.lower())

    def get_by_category(self, category: str) -> Dict[str, Identifier]:
        """Get identifiers by category ('constant' or 'function')."""
        names = self._categories.get(category, set())
        return {name: self._instances[name] for name in sorted(names)}


def create_default_registry() -> IdentifierRegistry:
    """Build the registry of built-in constants and functions."""
    registry = IdentifierRegistry()

    registry.register_constant(Constant(name="pi", value=math.pi, description="Ratio of a circle's circumference to its diameter"))
    registry.register_constant(Constant(name="e", value=math.e, description="Euler's number"))

    registry.register_function(UnaryFunction(name="sqrt", func=ieee_sqrt, description="Square root"))
    registry.register_function(UnaryFunction(name="sin", func=periodic(math.sin), description="Sine", angular=True))
    registry.register_function(UnaryFunction(name="cos", func=periodic(math.cos), description="Cosine", angular=True))
    registry.register_function(UnaryFunction(name="tan", func=periodic(math.tan), description="Tangent", angular=True))
    registry.register_function(UnaryFunction(
        name="log",
        func=math.log10,
        description="Base-10 logarithm",
        rejects=lambda x: x <= 0.0,
        domain_error="log domain error"
    ))
    registry.register_function(UnaryFunction(
        name="ln",
        func=math.log,
        description="Natural logarithm",
        rejects=lambda x: x <= 0.0,
        domain_error="ln domain error"
    ))
    return registry


DEFAULT_REGISTRY = create_default_registry()
