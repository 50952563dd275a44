"""
Sprite CFG - Configuration
==========================

Output and ROM-handling defaults used by the codecs and by cfgtool.
Configuration can come from:
- Default values (defined here)
- Environment variables (CfgConfig.from_env)
- Explicit set_config() calls, e.g. from tests

Environment variables (all optional):
    SPRITE_CFG_NEWLINE: "crlf" or "lf" line endings for .cfg output
    SPRITE_CFG_JSON_INDENT: indent width for .json output, "none" for compact
    SPRITE_CFG_ROM_HEADER: "auto", or copier header size in bytes (0 or 512)
    SPRITE_CFG_SLOT: default ROM sprite slot (decimal or 0x-prefixed hex)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

logger = logging.getLogger(__name__)

NEWLINES = {"crlf": "\r\n", "lf": "\n"}


@dataclass
class CfgConfig:
    """
    Configuration for reading and writing CFG data.

    Attributes:
        newline: Line ending written to .cfg files (legacy tools use CRLF)
        json_indent: Indentation of .json output (None for a single line)
        rom_header: Copier header size, or None to detect from the ROM length
        default_slot: ROM sprite slot used when none is given
    """

    newline: str = "\r\n"
    json_indent: Optional[int] = 4
    rom_header: Optional[int] = None
    default_slot: int = 0

    @classmethod
    def from_env(cls) -> "CfgConfig":
        """
        Create a CfgConfig from environment variables.

        Unparseable values are logged and the default is kept.
        """
        config = cls()

        if newline := os.environ.get("SPRITE_CFG_NEWLINE"):
            if newline.lower() in NEWLINES:
                config.newline = NEWLINES[newline.lower()]
            else:
                logger.warning(f"Ignoring SPRITE_CFG_NEWLINE={newline!r}: use crlf or lf")

        if indent := os.environ.get("SPRITE_CFG_JSON_INDENT"):
            if indent.lower() == "none":
                config.json_indent = None
            else:
                try:
                    config.json_indent = int(indent)
                except ValueError:
                    logger.warning(f"Ignoring SPRITE_CFG_JSON_INDENT={indent!r}")

        if header := os.environ.get("SPRITE_CFG_ROM_HEADER"):
            if header.lower() == "auto":
                config.rom_header = None
            else:
                try:
                    config.rom_header = int(header, 0)
                except ValueError:
                    logger.warning(f"Ignoring SPRITE_CFG_ROM_HEADER={header!r}")

        if slot := os.environ.get("SPRITE_CFG_SLOT"):
            try:
                config.default_slot = int(slot, 0)
            except ValueError:
                logger.warning(f"Ignoring SPRITE_CFG_SLOT={slot!r}")

        return config


_config: Optional[CfgConfig] = None


def get_config() -> CfgConfig:
    """Return the process-wide configuration, loading it from the environment once."""
    global _config
    if _config is None:
        _config = CfgConfig.from_env()
    return _config


def set_config(config: Optional[CfgConfig]) -> None:
    """Replace the process-wide configuration; None reloads from the environment."""
    global _config
    _config = config
