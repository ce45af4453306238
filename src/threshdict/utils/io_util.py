import inspect
import os
import tomllib
from typing import Any

# Robustly resolve the working directory, even if __file__ is unavailable
try:
    WORKING_DIR = os.path.dirname(os.path.abspath(__file__))
except NameError:
    WORKING_DIR = os.path.dirname(os.path.abspath(inspect.stack()[0][1]))


def resource_path(relative_path: str) -> str:
    normal_path = os.path.normpath(f"../resources/{relative_path}")
    return os.path.join(WORKING_DIR, normal_path)


def load_toml(path: str) -> dict[str, Any]:
    with open(path, mode="rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RuntimeError(f"Error loading TOML resource from {path}") from e


def load_resource_toml(relative_path: str) -> dict[str, Any]:
    return load_toml(resource_path(relative_path))
