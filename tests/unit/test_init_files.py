"""
Unit tests for __init__.py files

Ensures version attributes are defined, __all__ exports resolve, and the
packages import cleanly.
"""

import importlib

import pytest


class TestSeedloaderInit:
    """Test src/seedloader/__init__.py"""

    def test_version_attribute(self):
        # Arrange & Act
        import seedloader

        # Assert
        assert seedloader.__version__ == "1.0.0"

    def test_all_exports_resolve(self):
        """Every name in __all__ is importable from the package"""
        import seedloader

        for name in seedloader.__all__:
            assert hasattr(seedloader, name), f"seedloader.{name} missing"

    def test_entry_points_exported(self):
        import seedloader

        for name in ("load", "load_file", "load_files", "Dialect", "TransactionMode"):
            assert name in seedloader.__all__

    def test_cli_main_importable(self):
        from seedloader.cli import main

        assert callable(main)


class TestSeedutilsInit:
    """Test src/seedutils/__init__.py"""

    def test_version_attribute(self):
        import seedutils

        assert seedutils.__version__ == "1.0.0"

    def test_all_lists_submodules(self):
        import seedutils

        assert seedutils.__all__ == ["logging", "tracing", "metrics", "sql_safety"]

    def test_submodules_can_be_imported(self):
        """Test that submodules listed in __all__ can be imported"""
        import seedutils

        for module_name in seedutils.__all__:
            try:
                module = importlib.import_module(f"seedutils.{module_name}")
            except ImportError as e:
                pytest.fail(f"Failed to import seedutils.{module_name}: {e}")
            assert module is not None
