"""
Engine configuration.
"""

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union


@dataclass
class EngineConfig:
    """Configuration for the fallback engine.

    Holds search settings, logging and engine identity in one place.
    Can be loaded from the [engine] table of a TOML file.
    """

    # Search
    depth: int = 4
    """Search depth in plies"""

    alpha_beta: bool = True
    """Prune with alpha-beta (False searches exhaustively, same result)"""

    claim_draw: bool = False
    """Treat claimable draws (threefold repetition, fifty-move rule) as game over"""

    # Logging
    log_level: str = "INFO"
    """Level for the chess_fallback logger"""

    log_file: Optional[Path] = None
    """Log file path (None logs to stderr)"""

    # UCI identity
    engine_name: str = "ChessFallback"
    """Name reported to UCI GUIs"""

    engine_author: str = "chess-fallback developers"
    """Author reported to UCI GUIs"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

        if isinstance(self.depth, bool) or not isinstance(self.depth, int):
            raise ValueError(f"depth must be an integer, got {self.depth!r}")

        if self.depth < 0:
            raise ValueError(f"depth must be >= 0, got {self.depth}")

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log_level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_toml(cls, path: Union[str, Path] = "chess_fallback.toml") -> "EngineConfig":
        """
        Load configuration from the [engine] table of a TOML file.

        A missing file gives the defaults.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        path = Path(path)
        if not path.exists():
            return cls()

        with path.open("rb") as f:
            data = tomllib.load(f)

        table = data.get("engine", {})
        known = {f.name for f in fields(cls)}
        unknown = set(table) - known
        if unknown:
            raise ValueError(f"Unknown engine config keys: {', '.join(sorted(unknown))}")

        return cls(**table)

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(\n"
            f"  Search: depth={self.depth}, alpha_beta={self.alpha_beta}, claim_draw={self.claim_draw}\n"
            f"  Logging: level={self.log_level}, file={self.log_file}\n"
            f"  Engine: {self.engine_name} by {self.engine_author}\n"
            f")"
        )
