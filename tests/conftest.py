from __future__ import annotations

from pathlib import Path

import pytest

from tagcloud.config import CONFIG_ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TAGCLOUD_CONFIG", str(tmp_path / "config" / "config.json"))
    for env_var in CONFIG_ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
