from typing import Any

from threshdict.policies import Comparison, as_comparison
from threshdict.utils import io_util
from threshdict.utils.coll_util import ReadonlyDict


def _parse_config(relative_path: str = "config.toml") -> ReadonlyDict[str, Any]:
    """
    Load and parse the packaged config.toml file.
    """
    return ReadonlyDict(io_util.load_resource_toml(relative_path))


def validate_strategy_threshold(value: Any) -> int:
    # bool is an int subclass but never a meaningful threshold
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(
            f"strategy_threshold must be a non-negative integer, got {value!r}"
        )
    return value


config = _parse_config()

DEFAULT_STRATEGY_THRESHOLD: int = validate_strategy_threshold(
    config["search"]["strategy_threshold"]
)
DEFAULT_COMPARISON: Comparison = as_comparison(config["search"]["comparison"])
