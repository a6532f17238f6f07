import os
import tomllib
from importlib import resources
from typing import List, Tuple, Any


class ConfigException(Exception):
    pass


def merge_toml(main: dict[str, Any], default: dict[str, Any], current_path: str = "") -> Tuple[
    List[str], dict[str, Any]]:
    output = {}
    errors = []
    for key in default:
        path = f"{current_path}.{key}" if current_path else key
        if key in main:
            if type(main[key]) is type(default[key]):
                if isinstance(main[key], dict):
                    new_errors, output[key] = merge_toml(main[key], default[key], current_path=path)
                    errors.extend(new_errors)
                else:
                    output[key] = main[key]
            else:
                errors.append(path)
                output[key] = default[key]
        else:
            output[key] = default[key]
    return errors, output


def load_config(path: str | None = None) -> Tuple[List[str], dict[str, Any]]:
    with resources.files("dipgraph").joinpath("config_defaults.toml").open("rb") as toml_file:
        default_toml = tomllib.load(toml_file)

    if path is None:
        path = os.environ.get("DIPGRAPH_CONFIG", "config.toml")

    # the override file is optional, defaults cover every key
    if not os.path.isfile(path):
        return [], default_toml

    try:
        with open(path, "rb") as toml_file:
            toml = tomllib.load(toml_file)
    except tomllib.TOMLDecodeError as error:
        raise ConfigException(f"Could not read config file {path}: {error}") from error

    return merge_toml(toml, default_toml)


toml_errors, all_config = load_config()

# LOGGING
LOGGING_LEVEL = all_config["logging"]["log_level"]

# ADJUDICATOR
RANDOMIZE_ITERATION = all_config["adjudicator"]["randomize_iteration"]
RANDOM_SEED = all_config["adjudicator"]["seed"]
