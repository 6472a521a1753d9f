"""Whole-tree analysis pipeline producing the context artifact."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import AnalyzerConfig, load_tsconfig_excludes
from .extractor import MetadataExtractor
from .graph import link_components, root_component_ids
from .logging import get_logger
from .models import ContextApp
from .parsing import ParsedFile, SyntaxService
from .scanner import SourceScanner
from .stores import ComponentStore
from .translations import build_translation_index, load_translation_catalogs
from .types import DeclarationTypeResolver, TypeResolver

ResolverFactory = Callable[[Iterable[ParsedFile]], TypeResolver]


class ContextAnalyzer:
    """Runs scanning, extraction, linking and indexing for one source tree."""

    def __init__(
        self,
        config: AnalyzerConfig,
        syntax: SyntaxService | None = None,
        resolver_factory: ResolverFactory = DeclarationTypeResolver,
    ) -> None:
        self.config = config
        # Ids hash paths relative to this root, so it must match the scanned paths.
        self.root = Path(config.root).expanduser().resolve()
        self._syntax = syntax or SyntaxService()
        self._resolver_factory = resolver_factory
        self._logger = get_logger("analyzer")

    def analyze(self) -> ContextApp:
        started = time.perf_counter()
        root = self.root

        ignore = list(self.config.ignore) + load_tsconfig_excludes(self.config.tsconfig)
        files = SourceScanner(ignore=ignore).scan(root)
        self._logger.info("Found %d component source files", len(files))

        parsed = self._syntax.parse_files(files)
        app = self.analyze_parsed(parsed)

        self._logger.info(
            "Analysis completed in %.2fs: %d components, %d root(s), %d translation keys",
            time.perf_counter() - started,
            len(app.components),
            len(app.root_components),
            len(app.translations),
        )
        return app

    def analyze_parsed(self, parsed: List[ParsedFile]) -> ContextApp:
        """Build the artifact from already parsed files."""
        root = self.root
        resolver = self._resolver_factory(parsed)
        extractor = MetadataExtractor(root, resolver)

        store = ComponentStore()
        for parsed_file in parsed:
            extraction = extractor.extract(parsed_file)
            for record in extraction.components:
                if record.id in store:
                    self._logger.debug("Component id %s declared twice; keeping the later one", record.id)
                store.add(record)
        self._logger.debug("Extracted %d components", len(store))

        link_components(store)
        store.freeze()

        return ContextApp(
            name=self.config.app_name,
            root_dir=str(root),
            components=store.as_mapping(),
            root_components=root_component_ids(store),
            translations=build_translation_index(store),
            translation_values=load_translation_catalogs(self._translations_dir()),
        )

    def _translations_dir(self) -> Optional[Path]:
        directory = self.config.translations_dir
        if directory is not None and not directory.is_dir():
            self._logger.warning("Translations directory %s not found; skipping catalogs", directory)
            return None
        return directory


__all__ = ["ContextAnalyzer"]
