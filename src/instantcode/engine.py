"""Orchestration: from a source file to one annotation per callable.

For each file the engine builds the declaration table once, then handles
call-sites one at a time in declaration order: extract, synthesize arguments,
build the call, evaluate it in a fresh sandbox. A failure while handling one
call-site becomes that call-site's annotation and never stops the others.
Nothing is cached between runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from instantcode.callsites.builder import CallExpressionBuilder
from instantcode.callsites.extractor import CallSite, CallSiteExtractor
from instantcode.config import InstantCodeConfig
from instantcode.descriptors.context import build_context
from instantcode.descriptors.resolver import TypeResolver
from instantcode.frontend.parser import ParsedModule, PythonFrontend, read_source_file
from instantcode.frontend.protocols import FrontendProtocol
from instantcode.sandbox.evaluator import EvaluationResult, SandboxEvaluator
from instantcode.sandbox.protocols import EvaluatorProtocol
from instantcode.synthesis.randomness import RandomnessProvider, SystemRandomness
from instantcode.synthesis.synthesizer import ValueSynthesizer
from instantcode.utils.logging_utils import get_logger

logger = get_logger()


@dataclass(frozen=True)
class Annotation:
    """One result line for a callable.

    Attributes:
        display_text: The call expression followed by its rendered result
        anchor_position: Character offset of the callable's declaration
        name: The callable's name
        call_source: The call expression alone
        result: The evaluation outcome
    """

    display_text: str
    anchor_position: int
    name: str
    call_source: str
    result: EvaluationResult


class InstantCodeEngine:
    """Runs every top-level callable of a file with synthesized arguments."""

    def __init__(
        self,
        config: InstantCodeConfig | None = None,
        *,
        randomness: RandomnessProvider | None = None,
        evaluator: EvaluatorProtocol | None = None,
        frontend: FrontendProtocol | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Engine configuration
            randomness: Randomness provider; defaults to ``SystemRandomness``
                seeded from ``config.seed``
            evaluator: Call evaluator; defaults to ``SandboxEvaluator``
            frontend: Parsing and compilation service; defaults to
                ``PythonFrontend``
        """
        self.config = config or InstantCodeConfig()
        self.randomness = randomness or SystemRandomness(self.config.seed)
        self.evaluator = evaluator or SandboxEvaluator(self.config.sandbox)
        self.frontend = frontend or PythonFrontend()
        self.synthesizer = ValueSynthesizer(self.randomness, self.config.synthesis)

    def run_file(self, path: str | Path) -> list[Annotation]:
        """Annotate a file on disk.

        Raises:
            SourceFileNotFoundError: If the file does not exist
            UnsupportedFileError: If it is not a Python file
            SourceParseError: If it does not parse
        """
        source = read_source_file(path)
        return self.run_source(source, str(path))

    def run_source(self, source: str, filename: str = "<instantcode>") -> list[Annotation]:
        """Annotate source text.

        Raises:
            SourceParseError: If the text does not parse
        """
        return self.run(self.frontend.parse(source, filename))

    def run(self, module: ParsedModule) -> list[Annotation]:
        """Annotate an already parsed and compiled module."""
        resolver = TypeResolver(build_context(module.tree))
        call_sites = CallSiteExtractor(resolver, module.lines).extract(module.tree)
        builder = CallExpressionBuilder(self.synthesizer)
        logger.debug("Found call-sites", file=module.filename, count=len(call_sites))
        return [self._annotate(module, call_site, builder) for call_site in call_sites]

    def _annotate(self, module: ParsedModule, call_site: CallSite, builder: CallExpressionBuilder) -> Annotation:
        call_source = f"{call_site.name}(...)"
        try:
            call_source = builder.build(call_site).source_code
            result = self.evaluator.evaluate(module.code, call_source)
        except Exception as exc:
            # one broken call-site must not cost the rest of the file
            logger.warning(
                "Call-site failed outside the sandbox",
                file=module.filename,
                name=call_site.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            result = EvaluationResult.failure(f"{type(exc).__name__}: {exc}")

        logger.debug("Evaluated call-site", name=call_site.name, call=call_source, ok=result.ok)
        return Annotation(
            display_text=f"{call_source} => {result.render()}",
            anchor_position=call_site.anchor_position,
            name=call_site.name,
            call_source=call_source,
            result=result,
        )
