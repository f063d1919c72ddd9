"""Entry point extracting documentation from a Svelte component document."""

import logging

from sveltedoc.assembler import DocAssembler
from sveltedoc.classifier_v2 import classify_v2
from sveltedoc.classifier_v3 import classify_v3
from sveltedoc.declarations import ScriptDeclarations
from sveltedoc.errors import UnresolvedTypeWarning
from sveltedoc.markup_analyzer import MarkupCandidates, analyze_markup
from sveltedoc.markup_parser import parse_markup
from sveltedoc.models import SvelteComponentDoc
from sveltedoc.options import ExtractOptions
from sveltedoc.script_parser import parse_script
from sveltedoc.source_splitter import SplitSource, split_source

logger = logging.getLogger(__name__)


class ComponentExtractor:
    """Runs the extraction pipeline for one set of options.

    Each call to ``extract`` is independent; ``warnings`` holds the type
    inference fallbacks of the most recent run.
    """

    def __init__(self, options: ExtractOptions | None = None) -> None:
        """Initialize the extractor with its options."""
        self.options = options or ExtractOptions()
        self.warnings: list[UnresolvedTypeWarning] = []

    def extract(self, source: str) -> SvelteComponentDoc:
        """Extract the documentation object of one component document.

        Raises ParseError or DuplicateNameError; nothing is returned on failure.
        """
        self.warnings = []
        split = split_source(source)
        declarations = self._classify(split)
        markup = self._analyze_markup(split, declarations)
        doc = DocAssembler(self.options).assemble(declarations, markup)
        self.warnings = list(declarations.warnings)
        for warning in self.warnings:
            logger.debug("%s", warning)
        return doc

    def _classify(self, split: SplitSource) -> ScriptDeclarations:
        if split.module_script is not None:
            logger.debug(
                "Skipping module-level script at offset %d", split.module_script.start
            )
        if split.script is None:
            logger.debug("Component has no instance script")
            return ScriptDeclarations()
        region = split.script
        script = parse_script(region.content, region.content_start, region.lang)
        if self.options.dialect_version == 2:
            return classify_v2(script)
        return classify_v3(script)

    def _analyze_markup(
        self, split: SplitSource, declarations: ScriptDeclarations
    ) -> MarkupCandidates:
        root = parse_markup(split.markup)
        return analyze_markup(
            root,
            version=self.options.dialect_version,
            imports=declarations.imports,
            dispatchers=declarations.dispatchers,
        )


def extract(source: str, options: ExtractOptions | None = None) -> SvelteComponentDoc:
    """Extract the documentation object of a Svelte component document."""
    return ComponentExtractor(options).extract(source)
