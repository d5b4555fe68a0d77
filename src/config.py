"""Configuration module for the desirability project.

Centralizes default parameters. These are read-only defaults used as keyword
arguments; every function takes its parameters explicitly.
"""
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Desirability bounds
DEFAULT_DES_MIN = 0.0
DEFAULT_DES_MAX = 1.0

# Curve shape
DEFAULT_SCALE = 1.0

# Combination
DEFAULT_WEIGHT = 1.0

# Diagnostic overlay
DEFAULT_CURVE_POINTS = 500
DEFAULT_HISTOGRAM_BINS = 30

DEFAULT_LOG_LEVEL = "INFO"
