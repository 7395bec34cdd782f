"""Call expression building: a call-site plus synthesized arguments."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from instantcode.callsites.extractor import CallSite
from instantcode.synthesis.synthesizer import ValueSynthesizer
from instantcode.synthesis.values import SynthesizedValue, to_ast


@dataclass(frozen=True)
class CallExpression:
    """Printable call and where it belongs.

    Attributes:
        source_code: ``name(arg1, arg2, kw=arg3)`` as Python source
        position: Anchor offset of the call-site
        arguments: The synthesized value for each parameter, in order
    """

    source_code: str
    position: int
    arguments: tuple[tuple[str, SynthesizedValue], ...] = ()


class CallExpressionBuilder:
    """Synthesizes one argument per parameter, left to right."""

    def __init__(self, synthesizer: ValueSynthesizer) -> None:
        self.synthesizer = synthesizer

    def build(self, call_site: CallSite) -> CallExpression:
        args: list[ast.expr] = []
        keywords: list[ast.keyword] = []
        arguments: list[tuple[str, SynthesizedValue]] = []
        for parameter in call_site.parameters:
            value = self.synthesizer.synthesize(parameter.descriptor)
            arguments.append((parameter.name, value))
            if parameter.keyword_only:
                keywords.append(ast.keyword(arg=parameter.name, value=to_ast(value)))
            else:
                args.append(to_ast(value))

        call = ast.Call(func=ast.Name(id=call_site.name, ctx=ast.Load()), args=args, keywords=keywords)
        return CallExpression(
            source_code=ast.unparse(call),
            position=call_site.anchor_position,
            arguments=tuple(arguments),
        )
