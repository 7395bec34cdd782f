"""Value synthesis: one literal per type descriptor.

Synthesis is a structural recursion with one case per descriptor variant and
a fallback arm, so every input terminates in a literal.
"""

from __future__ import annotations

from instantcode.config.components import SynthesisConfig
from instantcode.descriptors.models import (
    Array,
    Constant,
    Dictionary,
    FixedTuple,
    NoneValue,
    Object,
    Primitive,
    PrimitiveKind,
    TypeDescriptor,
    Union,
    Unknown,
)
from instantcode.synthesis.randomness import RandomnessProvider
from instantcode.synthesis.values import (
    ArrayLiteral,
    BooleanLiteral,
    DictLiteral,
    NoneLiteral,
    NumberLiteral,
    ObjectLiteral,
    StringLiteral,
    SynthesizedValue,
    TupleLiteral,
)


def literal_for(value: object) -> SynthesizedValue:
    """Literal for a constant taken from ``Literal[...]``."""
    if isinstance(value, bool):
        return BooleanLiteral(value)
    if isinstance(value, (int, float)):
        return NumberLiteral(value)
    if isinstance(value, str):
        return StringLiteral(value)
    return NoneLiteral()


def hashable_key(value: SynthesizedValue) -> SynthesizedValue:
    """Rewrite a literal so it can be used as a dict key."""
    if isinstance(value, (ArrayLiteral, TupleLiteral)):
        return TupleLiteral(tuple(hashable_key(item) for item in value.items))
    if isinstance(value, (DictLiteral, ObjectLiteral)):
        return TupleLiteral(())
    return value


class ValueSynthesizer:
    """Builds random literals that match type descriptors."""

    def __init__(self, randomness: RandomnessProvider, config: SynthesisConfig | None = None) -> None:
        self.randomness = randomness
        self.config = config or SynthesisConfig()

    def synthesize(self, descriptor: TypeDescriptor) -> SynthesizedValue:
        return self._synthesize(descriptor, 0)

    def _count(self, depth: int) -> int:
        if depth >= self.config.max_depth:
            return 0
        low, high = self.config.count_range
        return self.randomness.count(low, high)

    def _synthesize(self, descriptor: TypeDescriptor, depth: int) -> SynthesizedValue:
        r = self.randomness

        if isinstance(descriptor, Primitive):
            if descriptor.kind is PrimitiveKind.STRING:
                return StringLiteral(r.words())
            if descriptor.kind is PrimitiveKind.NUMBER:
                low, high = self.config.integer_range
                return NumberLiteral(r.integer(low, high))
            return BooleanLiteral(r.boolean())

        if isinstance(descriptor, NoneValue):
            return NoneLiteral()

        if isinstance(descriptor, Constant):
            return literal_for(descriptor.values[r.choice(len(descriptor.values))])

        if isinstance(descriptor, Array):
            # each element is drawn independently
            return ArrayLiteral(tuple(self._synthesize(descriptor.element, depth + 1) for _ in range(self._count(depth))))

        if isinstance(descriptor, FixedTuple):
            return TupleLiteral(tuple(self._synthesize(element, depth + 1) for element in descriptor.elements))

        if isinstance(descriptor, Dictionary):
            entries = []
            for _ in range(self._count(depth)):
                key = hashable_key(self._synthesize(descriptor.key, depth + 1))
                entries.append((key, self._synthesize(descriptor.value, depth + 1)))
            return DictLiteral(tuple(entries))

        if isinstance(descriptor, Object):
            return ObjectLiteral(tuple((name, self._synthesize(field, depth + 1)) for name, field in descriptor.fields))

        if isinstance(descriptor, Union):
            alternatives = descriptor.alternatives
            return self._synthesize(alternatives[r.choice(len(alternatives))], depth)

        if isinstance(descriptor, Unknown):
            # no type information: guess a string or a number
            if r.choice(2) == 0:
                return StringLiteral(r.words())
            low, high = self.config.integer_range
            return NumberLiteral(r.integer(low, high))

        return NoneLiteral()
