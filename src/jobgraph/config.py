"""
Global Configuration and Layout Defaults.

This module centralizes the defaults shared by the layout engine, the
highlight state machine and the scheduler, and loads optional overrides
from a project-level YAML file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# --- Node Geometry ---
NODE_WIDTH = 172.0
NODE_HEIGHT = 36.0
DEFAULT_NODE_COLOR = "#6366f1"

# --- Spacing ---
DEFAULT_SPACING = 50.0
# Layers sit further apart than siblings
LAYER_SPACING_FACTOR = 1.5

# --- Algorithm Budgets ---
FORCE_ITERATIONS = 300
STRESS_ITERATIONS = 200
STRESS_TOLERANCE = 1e-4
# SMACOF inverts an n x n Laplacian; larger graphs fall back to the grid
STRESS_MAX_NODES = 1500
DEFAULT_SEED = 42
CROSSING_SWEEPS = 4
LAYOUT_TIME_BUDGET_SECONDS = 5.0

# --- Interaction ---
SEARCH_DEBOUNCE_SECONDS = 0.3
DIMMED_OPACITY = 0.3
EMPHASIZED_OPACITY = 1.0

DEFAULT_CONFIG_PATH = Path(".jobgraph/config.yaml")


def load_layout_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the `layout` section of the project config file.

    Returns an empty dict when the file does not exist. A file that exists
    but cannot be parsed is reported and treated as empty.

    Args:
        config_path: Path to the YAML config. Defaults to .jobgraph/config.yaml.

    Returns:
        Dict[str, Any]: Raw keyword arguments for LayoutOptions.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    section = data.get("layout", {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring non-mapping 'layout' section in {path}")
        return {}
    return section
