"""JSON settings file with single-generation backup and completeness checks."""
from __future__ import annotations

import json
import math
import pathlib
import shutil
from dataclasses import dataclass
from typing import Any, Final

from loguru import logger

from starsniper.engine.protocols import Theme
from starsniper.engine.theme import Tone, appline

# Recognized keys, in the order they are prompted for and written out.
CONFIG_KEYS: Final = ("api_id", "api_hash", "bot_token", "min_to_spend", "max_to_spend")

# bot_token is optional; everything else must be present before we go online.
REQUIRED_KEYS: Final = ("api_id", "api_hash", "min_to_spend", "max_to_spend")
NUMERIC_KEYS: Final = frozenset({"api_id", "min_to_spend", "max_to_spend"})
SPEND_KEYS: Final = ("min_to_spend", "max_to_spend")

ConfigRecord = dict[str, Any]


def as_number(value: Any) -> float | None:
    """Coerce a config value to a finite float, or None if it isn't one.

    bool is rejected even though it's an int subclass.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        num = float(value)
    except (TypeError, ValueError):
        return None

    if math.isnan(num) or math.isinf(num):
        return None

    return num


def as_api_id(value: Any) -> int | None:
    """Telegram API ids are non-negative whole numbers; None for anything else."""
    num = as_number(value)
    if num is None or num < 0 or not num.is_integer():
        return None

    return int(num)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_complete(record: ConfigRecord | None) -> bool:
    """True when ``record`` is ready for going online.

    Zero is a valid present value; NaN, blanks, negative spends, a negative
    or fractional api_id, and min > max are not.
    """
    if not isinstance(record, dict):
        return False

    for key in REQUIRED_KEYS:
        value = record.get(key)
        if is_blank(value):
            return False

        if key in NUMERIC_KEYS and as_number(value) is None:
            return False

    if as_api_id(record["api_id"]) is None:
        return False

    low, high = (as_number(record[k]) for k in SPEND_KEYS)
    assert low is not None and high is not None

    if low < 0 or high < 0:
        return False

    return low <= high


@dataclass(slots=True)
class ConfigStore:
    path: pathlib.Path
    backupPath: pathlib.Path
    theme: Theme

    def read(self) -> ConfigRecord:
        """Load the settings file; any failure yields an empty record."""
        try:
            config = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(config, dict):
                raise ValueError(f"expected a JSON object, got {type(config).__name__}")
        except (OSError, ValueError) as e:
            self.theme.echo(appline(f"Error reading or parsing {self.path.name}: {e}"), Tone.ERROR)
            logger.error("Error reading config: {}", e)
            return {}

        logger.info("Configuration read successfully")
        return config

    def backup(self) -> bool:
        """Copy the current settings file over the backup (no-op if absent)."""
        if not self.path.exists():
            return False

        try:
            shutil.copyfile(self.path, self.backupPath)
        except OSError as e:
            self.theme.echo(appline(f"Error creating config backup: {e}"), Tone.ERROR)
            logger.error("Error backing up config: {}", e)
            return False

        logger.info("Configuration backed up successfully")
        return True

    def write(self, record: ConfigRecord) -> bool:
        self.backup()

        try:
            self.path.write_text(json.dumps(record, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            self.theme.echo(appline(f"Error writing {self.path.name}: {e}"), Tone.ERROR)
            logger.error("Error writing config: {}", e)
            return False

        self.theme.echo(appline(f"Configuration saved to {self.path.name}"), Tone.OK)
        logger.info("Configuration saved successfully")
        return True
