"""Keeps the last parsed version of each watched outline to diff against."""

import logging
from dataclasses import dataclass
from pathlib import Path

from codoc.core.builder import CodocParser
from codoc.core.diff import StructuralDiffEngine
from codoc.models import ParseResult, RefactorMatch, StructuralDiff

logger = logging.getLogger(__name__)


@dataclass
class OutlineUpdate:
    path: Path
    result: ParseResult
    diff: StructuralDiff
    refactors: list[RefactorMatch]


class OutlineTracker:
    def __init__(self) -> None:
        self._parser = CodocParser()
        self._engine = StructuralDiffEngine()
        self._latest: dict[Path, ParseResult] = {}

    def seed(self, path: Path, text: str) -> ParseResult:
        result = self._parser.parse(text)
        self._latest[path] = result
        return result

    def update(self, path: Path, text: str) -> OutlineUpdate:
        previous = self._latest.get(path)
        result = self._parser.parse(text)
        diff = self._engine.compare(previous.nodes if previous else [], result.nodes)
        self._latest[path] = result
        logger.debug("Outline %s re-parsed with %d diagnostic(s)", path, len(result.diagnostics))
        return OutlineUpdate(path=path, result=result, diff=diff, refactors=self._engine.detect_refactors(diff))

    def forget(self, path: Path) -> None:
        self._latest.pop(path, None)
