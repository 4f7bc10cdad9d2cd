import os.path as osp
from pathlib import Path

import yaml
from qtpy import QtCore

from studypdf.utils.logger import logger


here = osp.dirname(osp.abspath(__file__))

IDENTITY_MODES = ("basename", "path_hash")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def update_dict(target_dict, new_dict, validate_item=None):
    for key, value in new_dict.items():
        if validate_item:
            validate_item(key, value)
        if key not in target_dict:
            logger.warning("Skipping unexpected key in config: {}".format(key))
            continue
        if isinstance(target_dict[key], dict) and isinstance(value, dict):
            update_dict(target_dict[key], value, validate_item=validate_item)
        else:
            target_dict[key] = value


# -----------------------------------------------------------------------------


def get_default_config():
    config_file = osp.join(here, "default_config.yaml")
    with open(config_file, encoding="utf-8") as f:
        config = yaml.safe_load(f)
    return config


def validate_config_item(key, value):
    if key == "document_identity" and value not in IDENTITY_MODES:
        raise ValueError(
            "Unexpected value for config key 'document_identity': {}".format(
                value
            )
        )
    if key == "log_level" and str(value).upper() not in LOG_LEVELS:
        raise ValueError(
            "Unexpected value for config key 'log_level': {}".format(value)
        )
    if key in ("default_scale", "min_scale", "max_scale", "zoom_step",
               "thumbnail_scale"):
        if not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(
                "Config key '{}' must be a positive number: {}".format(
                    key, value
                )
            )
    if key == "min_selection_size":
        if not isinstance(value, (int, float)) or value < 0:
            raise ValueError(
                "Config key 'min_selection_size' must be >= 0: {}".format(value)
            )
    if key == "default_color":
        # Imported lazily; models do not depend on the config layer.
        from studypdf.annotations.models import HighlightColor

        HighlightColor.from_value(value)


def get_config(config_file_or_yaml=None, config_from_args=None):
    # 1. default config
    config = get_default_config()

    # 2. specified as file or yaml
    if config_file_or_yaml is not None:
        config_from_yaml = yaml.safe_load(config_file_or_yaml)
        if not isinstance(config_from_yaml, dict):
            if not osp.isfile(str(config_from_yaml)):
                logger.warning(
                    "Config file not found, using defaults: {}".format(
                        config_from_yaml
                    )
                )
                config_from_yaml = {}
            else:
                with open(config_from_yaml, encoding="utf-8") as f:
                    logger.info(
                        "Loading config file from: {}".format(config_from_yaml)
                    )
                    config_from_yaml = yaml.safe_load(f) or {}
        update_dict(
            config, config_from_yaml, validate_item=validate_config_item
        )

    # 3. command line argument or specified config file
    if config_from_args is not None:
        update_dict(
            config, config_from_args, validate_item=validate_config_item
        )

    if config["min_scale"] > config["max_scale"]:
        raise ValueError(
            "min_scale ({}) exceeds max_scale ({})".format(
                config["min_scale"], config["max_scale"]
            )
        )
    return config


def default_data_dir(config=None) -> Path:
    """Resolve the per-user root that holds the annotation sidecars."""
    configured = (config or {}).get("data_dir")
    if configured:
        return Path(configured).expanduser()

    root = ""
    try:
        root = str(
            QtCore.QStandardPaths.writableLocation(
                QtCore.QStandardPaths.AppDataLocation
            )
        )
    except Exception:
        root = ""
    if not root:
        root = str(Path.home() / ".studypdf")
    return Path(root)
