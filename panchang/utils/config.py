# panchang/utils/config.py
import os

import yaml

DEFAULT_CONFIG_PATH = "config/defaults.yaml"


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.engine and cfg['engine'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value


def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj


def config_path() -> str:
    return os.environ.get("PANCHANG_CONFIG", DEFAULT_CONFIG_PATH)


def load_config(path: str = None):
    """
    Load YAML config from `path` (default: $PANCHANG_CONFIG or config/defaults.yaml).
    Optional override:
      - PANCHANG_ZODIAC  (overrides config['engine']['zodiac'] if set)
    Returns an AttrDict for convenient access.
    """
    with open(path or config_path(), "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config root must be a mapping")

    zodiac = os.getenv("PANCHANG_ZODIAC")
    if zodiac:
        engine = data.get("engine") or {}
        engine["zodiac"] = zodiac
        data["engine"] = engine

    return _to_attr(data)
