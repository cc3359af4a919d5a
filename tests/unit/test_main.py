"""om-api entry point: configuration failures exit with status 1."""

from unittest.mock import MagicMock

import pytest
import yaml
from fastapi import FastAPI

import src.main as main_module
from tests.factories import settings_data


@pytest.fixture
def uvicorn_run(monkeypatch) -> MagicMock:
    run = MagicMock()
    monkeypatch.setattr(main_module.uvicorn, "run", run)
    # dictConfig would stop om.* records from reaching caplog in later tests
    monkeypatch.setattr(main_module, "configure_logging", MagicMock())
    return run


def _config(tmp_path, monkeypatch, **overrides) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(settings_data(**overrides)), encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(path))


class TestMain:
    def test_starts_uvicorn_with_built_app(self, tmp_path, monkeypatch, uvicorn_run):
        _config(tmp_path, monkeypatch, port=4100)

        main_module.main()

        uvicorn_run.assert_called_once()
        app = uvicorn_run.call_args.args[0]
        assert isinstance(app, FastAPI)
        assert uvicorn_run.call_args.kwargs["port"] == 4100
        assert uvicorn_run.call_args.kwargs["loop"] == "uvloop"

    def test_missing_config_exits_1(self, tmp_path, monkeypatch, uvicorn_run):
        monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.yaml"))

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1
        uvicorn_run.assert_not_called()

    def test_invalid_config_exits_1(self, tmp_path, monkeypatch, uvicorn_run):
        _config(tmp_path, monkeypatch, api_keys=[])

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1
        uvicorn_run.assert_not_called()

    def test_unsupported_price_provider_exits_1(self, tmp_path, monkeypatch, uvicorn_run):
        _config(
            tmp_path,
            monkeypatch,
            price_provider={"type": "binance", "token_id": "charli3"},
        )

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

        assert exc_info.value.code == 1
        uvicorn_run.assert_not_called()
