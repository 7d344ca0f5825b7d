"""Relevance scanners that discover candidate documents for injection."""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from ..config.settings import DEFAULT_SKIP_DIRS
from ..errors import InvalidArgumentError, ScanError

logger = logging.getLogger(__name__)

HIGH_VALUE_NAMES = [
    'architecture', 'design', 'requirements', 'specification', 'specs',
    'planning', 'roadmap', 'overview', 'introduction', 'getting-started',
    'install', 'setup', 'configuration', 'api', 'guide', 'tutorial',
    'contributing', 'changelog', 'features', 'scope', 'objectives'
]

RELEVANT_TERMS = [
    'project', 'application', 'system', 'requirements', 'features',
    'functionality', 'architecture', 'design', 'implementation',
    'goals', 'objectives', 'scope', 'stakeholder', 'user story',
    'use case', 'business', 'technical', 'specification'
]

_HEADER_PATTERN = re.compile(r'^#+\s', re.MULTILINE)


@dataclass(frozen=True)
class CandidateDocument:
    """A document offered for injection by a scanner."""
    path: str
    text: str
    relevance_score: float
    category: str = "other"

    def __post_init__(self):
        if not isinstance(self.relevance_score, (int, float)) or isinstance(self.relevance_score, bool):
            raise InvalidArgumentError(f"Relevance score for {self.path} must be a number")
        if not 0 <= self.relevance_score <= 100:
            raise InvalidArgumentError(
                f"Relevance score for {self.path} must be within [0, 100], got {self.relevance_score}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'CandidateDocument':
        """Build a candidate from a dict with path, text and relevance_score (or relevanceScore)."""
        score = data.get('relevance_score', data.get('relevanceScore'))
        if score is None:
            raise InvalidArgumentError(f"Candidate {data.get('path')!r} has no relevance score")
        return cls(
            path=str(data['path']),
            text=str(data.get('text', '')),
            relevance_score=score,
            category=data.get('category', 'other')
        )


class RelevanceScanner(ABC):
    """Enumerates candidate documents under a root path."""

    @abstractmethod
    async def scan(self, root_path: str) -> List[CandidateDocument]:
        """Return candidate documents; raise ScanError when enumeration fails."""
        pass


class InMemoryRelevanceScanner(RelevanceScanner):
    """Scanner over an already-built list of candidates."""

    def __init__(self, documents: Iterable[CandidateDocument]):
        self.documents = list(documents)

    async def scan(self, root_path: str) -> List[CandidateDocument]:
        return list(self.documents)


def calculate_relevance_score(file_name: str, content: str, relative_path: str) -> int:
    """
    Score a markdown file by name, content and location.

    Args:
        file_name: Name of the file
        content: File content
        relative_path: Path relative to the project root

    Returns:
        Relevance score (0-100)
    """
    score = 0
    name_lower = file_name.lower()
    content_lower = content.lower()
    path_lower = relative_path.lower()

    if any(keyword in name_lower for keyword in HIGH_VALUE_NAMES):
        score += 20

    term_count = sum(1 for term in RELEVANT_TERMS if term in content_lower)
    score += min(term_count * 3, 30)

    if 'docs' in path_lower or 'documentation' in path_lower:
        score += 15
    if 'requirements' in path_lower or 'specs' in path_lower:
        score += 20
    if 'planning' in path_lower or 'design' in path_lower:
        score += 15

    if len(content) > 1000:
        score += 10
    if len(content) > 3000:
        score += 10

    if len(_HEADER_PATTERN.findall(content)) >= 3:
        score += 10

    return min(score, 100)


def categorize_markdown_file(file_name: str, content: str, relative_path: str) -> str:
    """Categorize a markdown file as primary, planning, development, documentation or other."""
    name_lower = file_name.lower()
    path_lower = relative_path.lower()

    if any(k in name_lower for k in ('overview', 'introduction', 'getting-started', 'setup')):
        return 'primary'

    if (any(k in name_lower for k in ('requirements', 'planning', 'roadmap', 'scope'))
            or 'requirements' in path_lower or 'planning' in path_lower):
        return 'planning'

    if any(k in name_lower for k in ('api', 'architecture', 'design', 'technical',
                                     'contributing', 'development')):
        return 'development'

    if ('docs' in path_lower or 'documentation' in path_lower
            or 'guide' in name_lower or 'tutorial' in name_lower):
        return 'documentation'

    return 'other'


class MarkdownRelevanceScanner(RelevanceScanner):
    """Walks a project tree for markdown files and scores each one."""

    def __init__(self,
                 max_depth: int = 3,
                 min_content_chars: int = 50,
                 skip_readme: bool = True,
                 skip_dirs: Optional[Iterable[str]] = None):
        self.max_depth = max_depth
        self.min_content_chars = min_content_chars
        self.skip_readme = skip_readme
        self.skip_dirs = set(skip_dirs if skip_dirs is not None else DEFAULT_SKIP_DIRS)

    async def scan(self, root_path: str) -> List[CandidateDocument]:
        return await asyncio.to_thread(self.scan_sync, root_path)

    def scan_sync(self, root_path: str) -> List[CandidateDocument]:
        """Blocking scan; results sorted by relevance score, highest first."""
        root = Path(root_path)
        if not root.is_dir():
            raise ScanError(f"Scan root is not a directory: {root_path}", root_path=str(root_path))

        candidates: List[CandidateDocument] = []
        self._walk(root, root, 0, candidates)

        candidates.sort(key=lambda c: c.relevance_score, reverse=True)
        logger.info("Found %d markdown candidates under %s", len(candidates), root_path)
        return candidates

    def _walk(self, directory: Path, root: Path, depth: int, out: List[CandidateDocument]):
        if depth > self.max_depth:
            return

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning("Skipping inaccessible directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.is_dir():
                if not self._should_skip_directory(entry.name):
                    self._walk(entry, root, depth + 1, out)
            elif entry.is_file() and entry.name.lower().endswith('.md'):
                candidate = self._read_candidate(entry, root)
                if candidate is not None:
                    out.append(candidate)

    def _read_candidate(self, file_path: Path, root: Path) -> Optional[CandidateDocument]:
        if self.skip_readme and file_path.name.lower() == 'readme.md':
            return None

        try:
            content = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", file_path, e)
            return None

        if len(content) < self.min_content_chars:
            return None

        relative_path = file_path.relative_to(root).as_posix()
        return CandidateDocument(
            path=relative_path,
            text=content,
            relevance_score=calculate_relevance_score(file_path.name, content, relative_path),
            category=categorize_markdown_file(file_path.name, content, relative_path)
        )

    def _should_skip_directory(self, name: str) -> bool:
        return name in self.skip_dirs or name.startswith('.')
