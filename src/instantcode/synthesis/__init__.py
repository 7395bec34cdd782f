"""Random literal synthesis driven by type descriptors."""

from .fakes import ScriptedRandomness
from .randomness import WORDS, RandomnessProvider, SystemRandomness
from .synthesizer import ValueSynthesizer, hashable_key, literal_for
from .values import (
    ArrayLiteral,
    BooleanLiteral,
    DictLiteral,
    NoneLiteral,
    NumberLiteral,
    ObjectLiteral,
    StringLiteral,
    SynthesizedValue,
    TupleLiteral,
    render,
    to_ast,
    to_python,
)

__all__ = [
    "WORDS",
    "ArrayLiteral",
    "BooleanLiteral",
    "DictLiteral",
    "NoneLiteral",
    "NumberLiteral",
    "ObjectLiteral",
    "RandomnessProvider",
    "ScriptedRandomness",
    "StringLiteral",
    "SynthesizedValue",
    "SystemRandomness",
    "TupleLiteral",
    "ValueSynthesizer",
    "hashable_key",
    "literal_for",
    "render",
    "to_ast",
    "to_python",
]
