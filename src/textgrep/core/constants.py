"""
Centralized constants for textgrep.

Defaults, ceilings and allow-lists shared by the option normalizer,
the directory walker and the search engines.
"""

# ============================================================================
# Search Options
# ============================================================================

DEFAULT_MAX_RESULTS = 100
"""Default cap on materialized matches per search call."""

DEFAULT_REGEX_FLAGS = "i"
"""Default regex flags (case-insensitive)."""

MAX_CONTEXT_LINES = 10
"""Upper clamp for context lines before/after a match."""

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
"""Files larger than this are skipped by the directory walker."""


# ============================================================================
# Engine Limits
# ============================================================================

DEFAULT_STREAM_THRESHOLD_BYTES = 50 * 1024 * 1024  # 50MB
"""Files larger than this are searched line-by-line instead of in memory."""

DEFAULT_MAX_FILES_TO_SEARCH = 1000
"""Hard ceiling of files examined by a single directory search."""

MIN_RESULTS_PER_FILE = 10
"""Lower bound of the per-file sub-budget during directory aggregation."""

RESULTS_PER_FILE_DIVISOR = 10
"""Per-file sub-budget is max_results // RESULTS_PER_FILE_DIVISOR."""


# ============================================================================
# Directory Filters
# ============================================================================

DEFAULT_EXCLUDE_PATTERNS = (
    "node_modules",
    "dist",
    ".git",
    ".next",
    "build",
    "coverage",
)
"""Substring patterns excluded from directory searches by default."""

PROJECT_EXCLUDE_PATTERNS = DEFAULT_EXCLUDE_PATTERNS + ("logs",)
"""Project-wide searches also skip log directories."""

TEXT_EXTENSIONS = frozenset({
    ".txt", ".md", ".js", ".ts", ".jsx", ".tsx", ".json", ".yaml", ".yml",
    ".xml", ".html", ".css", ".scss", ".less", ".py", ".java", ".c", ".cpp",
    ".h", ".hpp", ".cs", ".php", ".rb", ".go", ".rs", ".swift", ".kt",
    ".scala", ".sh", ".bash", ".ps1", ".sql", ".r", ".m", ".pl", ".lua",
    ".vim", ".conf",
})
"""Extensions searched when no explicit file types are given (plus extensionless files)."""
