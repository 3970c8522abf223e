import json
import logging
import pathlib
from typing import Any, List, Union

from media_recommendations.errors import LoadError

LOGGER = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(raw: str) -> Any:
    """`json.loads` that refuses NaN and Infinity like any strict JSON parser.

    Raises ValueError on invalid input and RecursionError on input nested
    deeper than the interpreter allows.
    """
    return json.loads(raw, parse_constant=_reject_constant)


def load_parameters(input_file: Union[str, pathlib.Path]) -> List[Any]:
    """Read the parameter input file: a JSON array of user events, in order."""
    path = pathlib.Path(input_file).expanduser().resolve()
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Reading the parameter input file {path} failed") from exc

    try:
        events = loads_strict(raw)
    except (ValueError, RecursionError) as exc:
        raise LoadError(f"Parsing the parameter input file {path} failed") from exc

    if not isinstance(events, list):
        raise LoadError(
            f"Parameter input file {path} must hold a JSON array, got {type(events).__name__}"
        )

    LOGGER.debug("Loaded %d user events from %s", len(events), path)
    return events
