"""
Tests for the run_app entry point.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

import run_app  # noqa: E402


def test_main_validates_config_only_in_create_app(monkeypatch):
    app = MagicMock()
    validate = MagicMock(return_value=[])
    monkeypatch.setattr(run_app, "create_app", MagicMock(return_value=app))
    monkeypatch.setattr(run_app.Config, "validate", validate)

    run_app.main()

    validate.assert_not_called()
    run_app.create_app.assert_called_once_with()
    app.run.assert_called_once()
