# -*- coding: utf-8 -*-
"""
DatForge Test Fixtures

Shared fixtures for all tests.
"""

import pytest
import sys
import os
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Qt model tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# =============================================================================
# SAMPLE FILES (one per dialect)
# =============================================================================

@pytest.fixture
def end_mill_lines() -> list:
    """Smallest complete tool file."""
    return [
        '#CLASS END_MILL',
        '#FORMAT T ST DIA HEI',
        '#DATA | 1 | 2 | 10.0 | 50.0 |',
        '#END_DATA',
    ]


@pytest.fixture
def tool_lines() -> list:
    """Tool database with a continued FORMAT, a continued row and a commented class."""
    return [
        '# NX tool_database.dat',
        '# Unit: Metric',
        '#',
        '',
        'CLASS MILLING_TOOL',
        '  FORMAT LIBRF T ST UGT UGST DESCR',
        '         DIA HEI FN',
        '  # first tool',
        '  DATA | ugt0201_001 | 02 | 01 | 1 | 1 | End Mill D10 | 10.0 | 50.0 | 2',
        '  DATA | ugt0201_002 | 02 | 01 | 1 | 1 | Ball Mill D6',
        '       | 6.0 | 40.0 | 2',
        '  DATA | ugt0201_003 | 02 | 01 |',
        'END_DATA',
        '',
        '#CLASS DRILL',
        '#FORMAT LIBRF T ST DIA',
        '#DATA | ugt0301_001 | 03 | 01 | 8.5',
        '#END_DATA',
    ]


@pytest.fixture
def holder_lines() -> list:
    """Holder database routed by RTYPE (no class markers)."""
    return [
        '# holder_database.dat',
        '# Unit: Metric',
        'FORMAT RTYPE LIBRF T STYPE HTYPE DESCR',
        'DATA | 1 | HLD_001 | 0 | 0 | 1 | Collet Chuck',
        'DATA | 1 | HLD_002 | 0 | 0 | 1 | Shrink Fit',
        'FORMAT RTYPE LIBRF SEQ DIAM LENGTH TAPER',
        'DATA | 2 | HLD_001 | 2 | 40.0 | 20.0 | 0',
        'DATA | 2 | HLD_001 | 1 | 50.0 | 30.0 | 0',
        'DATA | 2 | HLD_002 | 1 | 32.0 | 60.0 | 0',
        'DATA | 3 | HLD_009 | 1 | 1 | 1 | 1',
    ]


@pytest.fixture
def holder_marker_lines() -> list:
    """Holder database with a top-of-file index block and one #CLASS per holder."""
    return [
        '# holder_ascii.dat',
        'FORMAT RTYPE LIBRF T STYPE HTYPE DESCR',
        'DATA | 1 | HLD_001 | 0 | 0 | 1 | Collet Chuck',
        'END_DATA',
        '',
        '#CLASS HLD_001',
        '#FORMAT RTYPE LIBRF SEQ DIAM LENGTH TAPER',
        '#DATA | 2 | HLD_001 | 2 | 40.0 | 20.0 | 0',
        '#DATA | 2 | HLD_001 | 1 | 50.0 | 30.0 | 0',
        '#END_DATA',
    ]


@pytest.fixture
def shank_lines() -> list:
    """Shank database routed by RTYPE."""
    return [
        '# shank_database.dat',
        'FORMAT RTYPE LIBRF STYPE DESCR',
        'DATA | 1 | SHK_001 | 1 | Cylindrical',
        'FORMAT RTYPE LIBRF SEQ DIAM LENGTH TAPER',
        'DATA | 2 | SHK_001 | 1 | 10.0 | 30.0 | 0',
        'DATA | 2 | SHK_001 | x | 12.0 | 10.0 | 0',
        'DATA | 2 | SHK_001 | 0 | 8.0 | 5.0 | 0',
    ]


@pytest.fixture
def trackpoint_lines() -> list:
    """Trackpoint database with header comments and a comment between rows."""
    return [
        '##############################',
        '# trackpoint_database.dat',
        '# Unit: Inch',
        '##############################',
        '',
        'CLASS MILL',
        '# trackpoint definitions for mills',
        'FORMAT LIBRF DEFTYPE TPNAME ADJREG',
        'DATA | MILL_001 | 0 | TP_1 | 1',
        '# second point',
        'DATA | MILL_001 | 1 | TP_2 | 2',
        'END_DATA',
        '',
        'CLASS DRILL',
        'FORMAT LIBRF DEFTYPE TPNAME ADJREG',
        'DATA | DRILL_001 | 0 | TP_1 | 1',
        'END_DATA',
    ]


@pytest.fixture
def segmented_lines() -> list:
    """Segmented tool database with trailing pipes."""
    return [
        '# segmented_tool_database.dat',
        '# Unit: Metric',
        '',
        '#CLASS MILL_FORM',
        '#FORMAT LIBRF T STYPE SEQ RTYPE SWEEP LENGTH RADIUS',
        '#DATA | SEG_001 | 1 | 0 | 1 | 2 | 0.0 | 10.0 | 2.0 |',
        '#DATA | SEG_001 | 1 | 0 | 2 | 2 | 90.0 | 5.0 | 0.0 |',
        '#DATA | SEG_002 | 1 | 0 | 1 | 2 | 0.0 | 12.0 | 1.0 |',
        '#END_DATA',
    ]


# =============================================================================
# TEMP FILE FIXTURES
# =============================================================================

@pytest.fixture
def write_dat(tmp_path):
    """Factory writing lines to a file under tmp_path."""
    def _write(name: str, lines: list) -> Path:
        file_path = tmp_path / name
        file_path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
        return file_path
    return _write


@pytest.fixture
def holder_file(write_dat, holder_lines) -> Path:
    return write_dat("holder_database.dat", holder_lines)


@pytest.fixture
def tool_file(write_dat, tool_lines) -> Path:
    return write_dat("tool_database.dat", tool_lines)


# =============================================================================
# QT FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def qapp():
    """Shared QApplication for item model tests."""
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    return app
