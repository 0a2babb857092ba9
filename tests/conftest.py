import contextlib
import sys
from types import ModuleType
from pathlib import Path

import pytest


def _install_tkinter_mocks() -> None:
    # Build proper module objects so imports like `from tkinter import messagebox` work
    tk_mod = ModuleType("tkinter")

    class _DummyText:
        pass

    tk_mod.Text = _DummyText
    tk_mod.END = "end"
    tk_mod.Tk = object
    tk_mod.Toplevel = object

    messagebox_mod = ModuleType("tkinter.messagebox")
    simpledialog_mod = ModuleType("tkinter.simpledialog")

    def _dismissed(*args, **kwargs):  # noqa: ANN002, ANN003
        return None

    messagebox_mod.askyesnocancel = _dismissed
    simpledialog_mod.askinteger = _dismissed

    tk_mod.messagebox = messagebox_mod
    tk_mod.simpledialog = simpledialog_mod

    # Register modules
    sys.modules["tkinter"] = tk_mod
    sys.modules["tkinter.messagebox"] = messagebox_mod
    sys.modules["tkinter.simpledialog"] = simpledialog_mod


def pytest_configure(config):
    # Ensure repository root is importable as a package root (so 'shifter' works)
    with contextlib.suppress(Exception):
        root = Path(__file__).resolve().parents[1]
        sys.path.insert(0, str(root))
    _install_tkinter_mocks()


@pytest.fixture
def settings():
    from shifter.models.settings import ShifterSettings

    return ShifterSettings()


@pytest.fixture
def engine(settings):
    from shifter.services.shift_engine import ShiftEngine

    return ShiftEngine(settings)
