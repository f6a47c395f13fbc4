# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Configuration management for the photo-editor CLI."""

import os
from pathlib import Path

import yaml

CONFIG_DIR = Path.home() / ".photo-editor"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_CONFIG = {
    "server": "http://localhost:8000",
    "token": None,
    "model": None,
}

CONFIG_KEYS = ["server", "token", "model"]


def ensure_config_dir() -> None:
    """Ensure config directory exists."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> dict:
    """Load configuration from file or environment variables."""
    config = DEFAULT_CONFIG.copy()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "r") as f:
            file_config = yaml.safe_load(f) or {}
            config.update(file_config)

    # Environment variables override file config
    if os.environ.get("PHOTO_EDITOR_SERVER"):
        config["server"] = os.environ["PHOTO_EDITOR_SERVER"]
    if os.environ.get("PHOTO_EDITOR_TOKEN"):
        config["token"] = os.environ["PHOTO_EDITOR_TOKEN"]

    return config


def save_config(config: dict) -> None:
    """Save configuration to file."""
    ensure_config_dir()
    with open(CONFIG_FILE, "w") as f:
        yaml.dump(config, f, default_flow_style=False)
