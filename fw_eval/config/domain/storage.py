"""Result storage configuration model."""

from pathlib import Path

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    database: Path = Path("evals.db")
    debug_dir: Path = Path("debug-runs")
