"""Bundled instruction template and reply schema.

Both files live in ``prompts/`` next to this module. Callers may point at
their own files for experiments with wording or schema strictness.
"""

import json
from pathlib import Path
from typing import Any

from app.submission.exceptions import SubmissionError

PROMPTS_DIR = Path(__file__).parent / "prompts"
PROMPT_TEMPLATE_FILE = "analysis_prompt.txt"
JSON_SCHEMA_FILE = "analysis_schema.json"


def load_prompt_template(path: Path | None = None) -> str:
    """Return the instruction template with ``{question}``, ``{document_names}``
    and ``{json_schema}`` placeholders.

    Raises:
        SubmissionError: if the file cannot be read.
    """
    return _read(path or PROMPTS_DIR / PROMPT_TEMPLATE_FILE, "prompt template")


def load_json_schema(path: Path | None = None) -> dict[str, Any]:
    """Return the reply schema as a parsed JSON object.

    Raises:
        SubmissionError: if the file cannot be read or is not a JSON object.
    """
    text = _read(path or PROMPTS_DIR / JSON_SCHEMA_FILE, "JSON schema")
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SubmissionError(f"Invalid JSON schema in {path or JSON_SCHEMA_FILE}: {exc}") from exc
    if not isinstance(schema, dict):
        raise SubmissionError(f"JSON schema in {path or JSON_SCHEMA_FILE} must be an object")
    return schema


def _read(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SubmissionError(f"Failed to load {what}: {exc}") from exc
