"""
Constants
Centralised storage for allowed file types, result messages and commit rules.
"""
ALLOWED_EXTENSIONS = frozenset({
    "ts", "tsx", "js", "jsx", "py", "java", "go", "rs", "c", "cpp", "h", "cs",
})
JS_EXTENSIONS = frozenset({"ts", "tsx", "js", "jsx"})

# Per-file result messages
SKIPPED_NON_CODE = "Skipped non-code file"
SKIPPED_TOO_LARGE = "Skipped: file too large ({line_count} lines, max {max_lines})"
NOT_SELECTED = "Not selected for stress testing"
NO_CHANGES_MADE = "No changes made"

NO_MUTATION_SENTINEL = "No automatic changes could be applied - file may need manual review"

COMMIT_MESSAGE = "\U0001F525 {path} is stressed out"

NO_PROCESSABLE_FILES = "No processable files found"
STRESS_SUMMARY = "{success_count} of {total} files have been stressed out"
