import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]

for path in (
    ROOT / "packages" / "cli" / "src",
    ROOT / "packages" / "adapter-bigquery" / "src",
    ROOT / "packages" / "adapter-sdk" / "src",
):
    sys.path.insert(0, str(path))


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # The CLI callback reconfigures root handlers; keep pytest's capture intact.
    monkeypatch.setattr("orm_bigquery_cli.main.configure_logging", lambda **kwargs: None)
