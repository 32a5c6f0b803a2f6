# synastry_app/utils/config.py
import os
import json
import logging
import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

class AttrDict(dict):
    """Dict that also supports attribute access: cfg.locale and cfg['locale'] both work."""
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

def _load_json_if(path):
    if not path or not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        log.warning("ignoring unreadable JSON file %s: %s", path, e)
        return None

def _load_yaml_if(path):
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("ignoring unreadable config %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}

def load_config(path: str = None):
    """
    Load YAML config from `path` (default: $SYNASTRY_CONFIG or config/defaults.yaml).
    Optional overrides:
      - SYNASTRY_LOCALE   (overrides config['locale'] if set)
      - SYNASTRY_SAMPLES  (JSON list of sample chart pairs → config['samples'])
    A missing or unreadable file yields an empty config.
    Returns an AttrDict for convenient access.
    """
    path = path or os.getenv("SYNASTRY_CONFIG", DEFAULT_CONFIG_PATH)
    data = _load_yaml_if(path)

    locale = os.getenv("SYNASTRY_LOCALE")
    if locale:
        data["locale"] = locale

    samples_path = os.getenv("SYNASTRY_SAMPLES")
    if samples_path:
        samples = _load_json_if(samples_path)
        data["samples"] = samples if isinstance(samples, list) else []

    return _to_attr(data)
