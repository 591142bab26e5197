import yaml
import os

DEFAULT_CONFIG_FILE = os.path.join(os.path.dirname(__file__), "settings.yaml")


class ConfigLoader:
    def __init__(self, config_file=DEFAULT_CONFIG_FILE):
        self.config_file = config_file
        self.config = {}
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f) or {}
        if not isinstance(self.config, dict):
            raise ValueError(f"Configuration file {config_file} must contain a mapping at top level.")

    @classmethod
    def from_mapping(cls, mapping):
        """Build a loader around an in-memory mapping (tests, CLI overrides)."""
        loader = cls(config_file=None)
        loader.config = dict(mapping)
        return loader

    def has(self, *keys):
        ref = self.config
        for key in keys:
            if not isinstance(ref, dict) or key not in ref:
                return False
            ref = ref[key]
        return True

    def get(self, *keys, default=None):
        """
        Look up a nested configuration value.
        When a key on the path is missing:
          - raise KeyError if no default was given
          - return the default otherwise
        """
        ref = self.config
        for key in keys:
            if isinstance(ref, dict) and key in ref:
                ref = ref[key]
            else:
                if default is not None:
                    return default
                raise KeyError(f"Configuration key {' -> '.join(keys)} not found and no default provided.")
        return ref
