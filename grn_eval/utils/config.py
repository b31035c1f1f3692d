"""
Configuration management utilities.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging import setup_logger


ANALYSIS_FLAGS = (
    "plot_roc",
    "auroc",
    "plot_pr",
    "aupr",
    "network_motif_analysis",
    "edge_type_analysis",
    "loop_analysis",
)


def load_config(config_path: str | Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Configuration dictionary.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


@lru_cache(maxsize=8)
def get_config(config_name: str = "evaluation") -> Dict[str, Any]:
    """
    Get a cached configuration shipped with the package.

    Parameters
    ----------
    config_name : str
        Name of the configuration file (without .yaml extension).

    Returns
    -------
    dict
        Configuration dictionary.
    """
    from grn_eval import CONFIG_DIR

    config_path = CONFIG_DIR / f"{config_name}.yaml"
    return load_config(config_path)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate a configuration dictionary.

    Parameters
    ----------
    config : dict
        Configuration dictionary to validate.

    Returns
    -------
    bool
        True if valid, raises exception otherwise.
    """
    required_keys = ["analysis", "prediction"]

    for key in required_keys:
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")

    unknown = set(config["analysis"] or {}) - set(ANALYSIS_FLAGS)
    if unknown:
        raise ValueError(f"Unknown analysis flags: {sorted(unknown)}. Must be among {list(ANALYSIS_FLAGS)}")

    floor = (config.get("statistics") or {}).get("pvalue_floor", 1e-200)
    if not 0 <= float(floor) < 1:
        raise ValueError(f"Invalid pvalue_floor: {floor}. Must be in [0, 1)")

    return True


@dataclass
class EvaluationSettings:
    """
    Analysis flags and options of an evaluation run.

    The flags decide which analyses the evaluators perform; everything
    else is passed through unchanged to the analyzers.
    """

    plot_roc: bool = False
    auroc: bool = False
    plot_pr: bool = False
    aupr: bool = False
    network_motif_analysis: bool = False
    edge_type_analysis: bool = False
    loop_analysis: bool = False

    predict_self_loops: bool = False
    pvalue_floor: float = 1e-200

    output_dir: str = "."
    prediction_name: str = ""

    log_level: str = "INFO"
    log_file: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def needs_background(self) -> bool:
        return self.network_motif_analysis or self.edge_type_analysis

    @property
    def needs_score(self) -> bool:
        return self.plot_roc or self.plot_pr or self.aupr or self.auroc

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "EvaluationSettings":
        """Build settings from a (validated) configuration dictionary."""
        validate_config(config)

        analysis = config.get("analysis", {}) or {}
        prediction = config.get("prediction", {}) or {}
        statistics = config.get("statistics", {}) or {}
        output = config.get("output", {}) or {}
        logging_cfg = config.get("logging", {}) or {}

        known = {"analysis", "prediction", "statistics", "output", "logging"}

        return cls(
            **{flag: bool(analysis.get(flag, False)) for flag in ANALYSIS_FLAGS},
            predict_self_loops=bool(prediction.get("predict_self_loops", False)),
            pvalue_floor=float(statistics.get("pvalue_floor", 1e-200)),
            output_dir=str(output.get("directory", ".")),
            prediction_name=str(output.get("prediction_name", "") or ""),
            log_level=str(logging_cfg.get("level", "INFO")),
            log_file=logging_cfg.get("file"),
            extra={k: v for k, v in config.items() if k not in known},
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "EvaluationSettings":
        return cls.from_dict(load_config(config_path))

    @classmethod
    def default(cls) -> "EvaluationSettings":
        """Settings of the configuration shipped with the package."""
        return cls.from_dict(get_config("evaluation"))

    def flags(self) -> Dict[str, bool]:
        return {flag: getattr(self, flag) for flag in ANALYSIS_FLAGS}

    def configure_logging(self):
        """Set up the package logger from the logging section."""
        return setup_logger("grn_eval", log_file=self.log_file, level=self.log_level)
