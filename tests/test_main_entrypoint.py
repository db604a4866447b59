"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

import io
from pathlib import Path
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

from editchat.__main__ import main


class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def test_main_loads_config_and_runs_app(self) -> None:
        with patch("editchat.__main__.ensure_config_dir") as ensure_mock, patch(
            "editchat.__main__.load_config", return_value={"logging": {}}
        ) as load_mock, patch(
            "editchat.__main__.configure_logging"
        ) as logging_mock, patch(
            "editchat.__main__.ChatApp"
        ) as app_cls_mock:
            app_cls_mock.return_value.run = AsyncMock(return_value=0)
            with self.assertRaises(SystemExit) as exit_ctx:
                main(["--config", "/tmp/editchat-test.toml"])

        self.assertEqual(exit_ctx.exception.code, 0)
        ensure_mock.assert_called_once()
        load_mock.assert_called_once_with(
            config_path=Path("/tmp/editchat-test.toml"), strict=True
        )
        logging_mock.assert_called_once_with({})
        app_cls_mock.assert_called_once_with(config={"logging": {}})
        app_cls_mock.return_value.run.assert_awaited_once()

    def test_default_config_location_is_lenient(self) -> None:
        with patch("editchat.__main__.ensure_config_dir"), patch(
            "editchat.__main__.load_config", return_value={"logging": {}}
        ) as load_mock, patch("editchat.__main__.configure_logging"), patch(
            "editchat.__main__.ChatApp"
        ) as app_cls_mock:
            app_cls_mock.return_value.run = AsyncMock(return_value=0)
            with self.assertRaises(SystemExit):
                main([])

        load_mock.assert_called_once_with(config_path=None, strict=False)

    def test_unusable_explicit_config_exits_with_usage_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing.toml"
            with patch("editchat.__main__.ensure_config_dir"), patch(
                "editchat.__main__.ChatApp"
            ) as app_cls_mock, patch(
                "sys.stderr", new_callable=io.StringIO
            ) as stderr:
                with self.assertRaises(SystemExit) as exit_ctx:
                    main(["--config", str(missing)])

        self.assertEqual(exit_ctx.exception.code, 2)
        self.assertIn("does not exist", stderr.getvalue())
        app_cls_mock.assert_not_called()

    def test_version_flag_prints_and_returns(self) -> None:
        with patch("editchat.__main__.ChatApp") as app_cls_mock, patch(
            "sys.stdout", new_callable=io.StringIO
        ) as stdout:
            main(["--version"])

        self.assertTrue(stdout.getvalue().startswith("editchat "))
        app_cls_mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
