"""Case-study input save/load using JSON serialization.

Only inputs are stored; calculation results are recomputed on load.
"""

import json
from pathlib import Path

from benefit_calc.models.line_items import AnalysisInputs


def save_inputs(inputs: AnalysisInputs, filepath: str) -> None:
    """Save case-study inputs to a JSON file.

    Args:
        inputs: Line items and settings to save.
        filepath: Output file path (should end in .json).

    Raises:
        OSError: If file cannot be written.
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(inputs.to_dict(), f, indent=2, ensure_ascii=False)


def load_inputs(filepath: str) -> AnalysisInputs:
    """Load case-study inputs from a JSON file.

    Args:
        filepath: Path to the JSON inputs file.

    Returns:
        Reconstructed AnalysisInputs.

    Raises:
        FileNotFoundError: If file does not exist.
        json.JSONDecodeError: If file is not valid JSON.
        KeyError: If a line item has no node_id or a value has no year.
        ValueError: If settings are out of range or a value is not numeric.
        TypeError: If a value has the wrong JSON type (e.g. a list).
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return AnalysisInputs.from_dict(data)
