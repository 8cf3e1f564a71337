from pathlib import Path

from finintake.extraction.exceptions import ExtractionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load an extraction prompt template.

    Args:
        name: Template name, e.g. "document" or "audio". Resolves to the
              bundled prompts/<name>_prompt.txt when no path is given.
        path: Explicit template file, overrides the bundled one.

    Returns:
        The raw template string with placeholders.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt template: {exc}") from exc


def load_json_shape(name: str, path: Path | None = None) -> str:
    """Load the target JSON shape embedded into a prompt.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / f"{name}_shape.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load JSON shape: {exc}") from exc
