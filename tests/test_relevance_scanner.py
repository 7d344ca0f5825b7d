"""Tests for relevance scanners."""

import logging
from pathlib import Path

import pytest

from context_budget.errors import InvalidArgumentError, ScanError
from context_budget.services.relevance_scanner import (
    RELEVANT_TERMS,
    CandidateDocument,
    InMemoryRelevanceScanner,
    MarkdownRelevanceScanner,
    calculate_relevance_score,
    categorize_markdown_file,
)

SCANNER_LOGGER = "context_budget.services.relevance_scanner"


def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


LONG_DOC = (
    "# Architecture\n\n## Components\n\n## Deployment\n\n"
    "The system architecture describes the project design and implementation goals."
)


class TestCandidateDocument:
    """Test cases for CandidateDocument."""

    def test_valid_candidate(self):
        """Test a candidate defaults to the 'other' category."""
        candidate = CandidateDocument("docs/a.md", "text", 42.5)
        assert candidate.category == "other"

    @pytest.mark.parametrize("score", [-0.1, 100.5, "90", None, True])
    def test_invalid_score(self, score):
        """Test out-of-range and non-numeric scores are rejected."""
        with pytest.raises(InvalidArgumentError):
            CandidateDocument("a.md", "text", score)

    def test_from_mapping_accepts_camel_case_score(self):
        """Test mappings may use the relevanceScore key."""
        candidate = CandidateDocument.from_mapping({"path": "a.md", "text": "t", "relevanceScore": 80})
        assert candidate.relevance_score == 80

    def test_from_mapping_requires_score(self):
        """Test a mapping without a score is rejected."""
        with pytest.raises(InvalidArgumentError):
            CandidateDocument.from_mapping({"path": "a.md", "text": "t"})


class TestScoring:
    """Test cases for relevance scoring and categorization."""

    def test_score_components(self):
        """Test name, term and path bonuses add up."""
        # name keyword 20 + two terms 6 + requirements/specs path 20
        score = calculate_relevance_score("requirements.md", "project scope", "specs/requirements.md")
        assert score == 46

    def test_score_is_capped(self):
        """Test the score never exceeds 100."""
        content = " ".join(RELEVANT_TERMS) + "\n# A\n# B\n# C\n" + "x" * 3001
        score = calculate_relevance_score(
            "architecture.md", content, "docs/requirements/planning/architecture.md"
        )
        assert score == 100

    def test_plain_file_scores_low(self):
        """Test a file with no signals scores zero."""
        assert calculate_relevance_score("notes.md", "nothing to see", "notes.md") == 0

    @pytest.mark.parametrize("name,path,expected", [
        ("getting-started.md", "getting-started.md", "primary"),
        ("roadmap.md", "roadmap.md", "planning"),
        ("notes.md", "planning/notes.md", "planning"),
        ("api.md", "api.md", "development"),
        ("notes.md", "docs/notes.md", "documentation"),
        ("misc.md", "misc.md", "other"),
    ])
    def test_categories(self, name, path, expected):
        """Test category assignment by name and path."""
        assert categorize_markdown_file(name, "", path) == expected


class TestInMemoryRelevanceScanner:
    """Test cases for InMemoryRelevanceScanner."""

    @pytest.mark.asyncio
    async def test_returns_copy(self):
        """Test callers cannot mutate the scanner's documents."""
        documents = [CandidateDocument("a.md", "text", 50)]
        scanner = InMemoryRelevanceScanner(documents)

        result = await scanner.scan("anywhere")
        result.clear()

        assert await scanner.scan("anywhere") == documents


class TestMarkdownRelevanceScanner:
    """Test cases for MarkdownRelevanceScanner."""

    @pytest.mark.asyncio
    async def test_scan_project_tree(self, tmp_path):
        """Test scanning skips README, short files, tool and hidden directories."""
        _write(tmp_path / "docs" / "architecture.md", LONG_DOC)
        _write(tmp_path / "notes.md", "Some loose notes about the weekly sync meeting agenda.")
        _write(tmp_path / "README.md", "# Readme\n\n" + "r" * 200)
        _write(tmp_path / "tiny.md", "too short")
        _write(tmp_path / "node_modules" / "pkg" / "guide.md", LONG_DOC)
        _write(tmp_path / ".hidden" / "design.md", LONG_DOC)
        _write(tmp_path / "src" / "main.py", "print('not markdown')" * 10)

        candidates = await MarkdownRelevanceScanner().scan(str(tmp_path))
        paths = [c.path for c in candidates]

        assert paths == ["docs/architecture.md", "notes.md"]
        assert candidates[0].relevance_score > candidates[1].relevance_score
        assert candidates[0].category == "development"

    @pytest.mark.asyncio
    async def test_depth_limit(self, tmp_path):
        """Test files below max_depth are not visited."""
        body = "Deeply nested documentation page with enough text to count."
        _write(tmp_path / "a" / "b" / "c" / "kept.md", body)
        _write(tmp_path / "a" / "b" / "c" / "d" / "dropped.md", body)

        candidates = await MarkdownRelevanceScanner(max_depth=3).scan(str(tmp_path))

        assert [c.path for c in candidates] == ["a/b/c/kept.md"]

    @pytest.mark.asyncio
    async def test_dot_directories_are_skipped(self, tmp_path):
        """Test every dot-directory is skipped, .github included."""
        _write(tmp_path / ".github" / "contributing.md", LONG_DOC)

        assert await MarkdownRelevanceScanner().scan(str(tmp_path)) == []

    @pytest.mark.asyncio
    async def test_readme_included_when_configured(self, tmp_path):
        """Test README.md is returned when skip_readme is off."""
        _write(tmp_path / "README.md", "# Readme\n\n" + "r" * 200)

        candidates = await MarkdownRelevanceScanner(skip_readme=False).scan(str(tmp_path))

        assert [c.path for c in candidates] == ["README.md"]

    @pytest.mark.asyncio
    async def test_undecodable_file_is_skipped(self, tmp_path, caplog):
        """Test a file that cannot be decoded is logged and skipped."""
        _write(tmp_path / "docs" / "architecture.md", LONG_DOC)
        (tmp_path / "docs" / "broken.md").write_bytes(b"\xff\xfe" + b"\xff" * 120)

        with caplog.at_level(logging.WARNING, logger=SCANNER_LOGGER):
            candidates = await MarkdownRelevanceScanner().scan(str(tmp_path))

        assert [c.path for c in candidates] == ["docs/architecture.md"]
        assert any(
            record.levelno == logging.WARNING and "broken.md" in record.getMessage()
            for record in caplog.records
        )

    @pytest.mark.asyncio
    async def test_inaccessible_directory_is_skipped(self, tmp_path, monkeypatch, caplog):
        """Test an unlistable subdirectory is skipped and its siblings are kept."""
        _write(tmp_path / "docs" / "architecture.md", LONG_DOC)
        _write(tmp_path / "private" / "design.md", LONG_DOC)

        original_iterdir = Path.iterdir

        def guarded_iterdir(self):
            if self.name == "private":
                raise PermissionError(13, "Permission denied", str(self))
            return original_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", guarded_iterdir)

        with caplog.at_level(logging.WARNING, logger=SCANNER_LOGGER):
            candidates = await MarkdownRelevanceScanner().scan(str(tmp_path))

        assert [c.path for c in candidates] == ["docs/architecture.md"]
        assert any("private" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_missing_root(self, tmp_path):
        """Test a missing root raises ScanError carrying the path."""
        with pytest.raises(ScanError) as exc_info:
            await MarkdownRelevanceScanner().scan(str(tmp_path / "missing"))
        assert exc_info.value.root_path == str(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_empty_tree(self, tmp_path):
        """Test an empty directory yields no candidates."""
        assert await MarkdownRelevanceScanner().scan(str(tmp_path)) == []
