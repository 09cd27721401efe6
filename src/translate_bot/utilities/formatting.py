from typing import Any

import yaml


def dump_yaml(value: Any) -> str:  # pyright: ignore[reportAny]
    return yaml.safe_dump(value, indent=1, sort_keys=False, width=400, allow_unicode=True)
