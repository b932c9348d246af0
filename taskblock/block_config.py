"""Parse the ``key: value`` lines of a block."""

from typing import Dict


def parse_block_config(source: str, lowercase_keys: bool = True) -> Dict[str, str]:
    """
    Turn raw block text into a flat ``{option: value}`` mapping.

    Each line is split on its first ``:``. Lines without a colon, or whose key
    or value is empty after trimming, are skipped. Later duplicates win.
    Nothing is validated and nothing is raised.
    """
    config: Dict[str, str] = {}
    if not source:
        return config
    for line in source.split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if not key or not value:
            continue
        if lowercase_keys:
            key = key.lower()
        config[key] = value
    return config
