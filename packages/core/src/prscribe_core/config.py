import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "model": "anthropic",
    "model_name": None,  # None = the provider's default model
    "max_chars_per_file": 20000,
    "guidelines": None,  # None = use built-in default; set to a path string to override
    "placeholder_message": "Reviewing this pull request, the analysis will appear here shortly.",
    "heading": "PR Review",
    "host": "0.0.0.0",
    "port": 3000,
    "log_level": "INFO",
}

BUILTIN_GUIDELINES_DIR = Path(__file__).parent / "guidelines"
_BUILTIN_DEFAULT = BUILTIN_GUIDELINES_DIR / "default.md"


class ConfigError(ValueError):
    """Raised when required credentials or settings are missing."""


def load_config(config_path: str = ".prscribe.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prscribe.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    port = os.environ.get("PORT")
    if port and not (cli_overrides or {}).get("port"):
        config["port"] = int(port)

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["github_app_id"] = os.environ.get("GITHUB_APP_ID")
    private_key = os.environ.get("GITHUB_PRIVATE_KEY")
    # Keys pasted into a single-line .env entry carry literal "\n" sequences.
    config["github_private_key"] = private_key.replace("\\n", "\n") if private_key else None
    config["github_installation_id"] = os.environ.get("GITHUB_INSTALLATION_ID")
    config["webhook_secret"] = os.environ.get("GITHUB_WEBHOOK_SECRET")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

    return config


def has_app_credentials(config: dict) -> bool:
    return all(config.get(k) for k in ("github_app_id", "github_private_key", "github_installation_id"))


def validate_config(config: dict) -> None:
    """Fail fast when the credentials needed to run a review are missing."""
    if not config.get("github_token") and not has_app_credentials(config):
        missing = [
            name
            for name, key in (
                ("GITHUB_APP_ID", "github_app_id"),
                ("GITHUB_PRIVATE_KEY", "github_private_key"),
                ("GITHUB_INSTALLATION_ID", "github_installation_id"),
            )
            if not config.get(key)
        ]
        raise ConfigError(
            "No GitHub credentials found. Set GITHUB_TOKEN, or the GitHub App variables "
            f"(missing: {', '.join(missing)})."
        )

    model = config.get("model")
    if model == "anthropic" and not config.get("anthropic_api_key"):
        raise ConfigError("ANTHROPIC_API_KEY environment variable is not set.")
    if model == "openai" and not config.get("openai_api_key"):
        raise ConfigError("OPENAI_API_KEY environment variable is not set.")


def load_guidelines(config: dict) -> str:
    """
    Load the review focus areas injected into the prompt.

    If ``guidelines`` is set in config, loads from that path (relative to cwd).
    Otherwise falls back to the built-in default.
    """
    custom_path = config.get("guidelines")
    if custom_path:
        p = Path(custom_path)
        if not p.exists():
            raise FileNotFoundError(f"Guidelines file not found: {custom_path}")
        return p.read_text()

    if _BUILTIN_DEFAULT.exists():
        return _BUILTIN_DEFAULT.read_text()

    raise FileNotFoundError("No guidelines configured and built-in default is missing.")
