import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tokenplotter.core.data_source import DataSource
from tokenplotter.shared.errors import NotFoundError


SCHEDULE = {
    "start_ts": 1000,
    "delta": 100,
    "block_diffs": [0, 0, 0, 0],
    "ts_offsets": [0, 0, 0, 0],
}
CATALOG = {
    "DAI": {"address": "0xDAIaddr"},
    "MKR": {"address": "0xMKRaddr"},
    "ZRO": {"address": "0xZROaddr"},
}
SERIES = {
    "0xdaiaddr.json": {"start_index": 0, "prices": [0.5, 0.5, 0.25, 0.25]},
    "0xmkraddr.json": {"start_index": 1, "prices": [2.0, 4.0, 8.0]},
    "0xzroaddr.json": {"start_index": 2, "prices": [0.0, 3.0]},
}


class FakeDataSource(DataSource):
    """In-memory data source that counts loads per resource name"""

    def __init__(self, files: Dict[str, Any]) -> None:
        super().__init__()
        self.files = files
        self.calls: List[str] = []

    def load(self, name: str) -> Any:
        self.calls.append(name)
        if name not in self.files:
            raise NotFoundError(f"Resource not found: {name}")
        return self.files[name]


def default_files() -> Dict[str, Any]:
    files = {"blocktimes.json": SCHEDULE, "tokens.json": CATALOG}
    files.update(SERIES)
    return files


@pytest.fixture
def fake_source() -> FakeDataSource:
    return FakeDataSource(default_files())


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "tokenplotter_data"
    d.mkdir()
    for name, payload in default_files().items():
        (d / name).write_text(json.dumps(payload), encoding="utf-8")
    return d
