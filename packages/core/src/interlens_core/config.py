import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "analysis_api": "http://localhost:8080",
    "request_timeout": 10.0,
    "file_extension": ".java",  # analyzer reports files without it
    "context_lines": 1,
    "line_height": 18,
    "colors": {"main": "#1F6FEB", "alt": "#142A38"},
    "exclude": [],  # fnmatch patterns or directory names kept out of the diff view
}


def load_config(config_path: str = ".interlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .interlens.yml in the current directory
      3. Environment (INTERLENS_ANALYSIS_API)
      4. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "colors": dict(DEFAULT_CONFIG["colors"]),
        "exclude": list(DEFAULT_CONFIG["exclude"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        colors = file_config.pop("colors", None) or {}
        config.update(file_config)
        config["colors"].update(colors)

    api = os.environ.get("INTERLENS_ANALYSIS_API")
    if api:
        config["analysis_api"] = api

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["analysis_api"] = str(config["analysis_api"]).rstrip("/")
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
