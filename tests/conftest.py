"""Shared fixtures: a small design with one good, one stubbed and one malformed net."""

from __future__ import annotations

import pytest

SAMPLE_DESIGN = """\
MaxCellMove 1
GGridBoundaryIdx 1 1 5 5
NumLayer 2
Lay M1 1 H 10
Lay M2 2 V 8
NumNonDefaultSupplyGGrid 1
2 2 1 -2
NumMasterCell 1
MasterCell MC1 2 1
Pin P1 M1
Pin P2 M2
Blkg B1 M1 2
NumNeighborCellExtraDemand 1
sameGGrid MC1 MC1 M1 1
NumCellInst 4
CellInst C1 MC1 1 1 Movable
CellInst C2 MC1 1 4 Fixed
CellInst C3 MC1 3 1 Movable
CellInst C4 MC1 5 5 Fixed
NumNets 3
Net N1 2 NoCstr
Pin C1/P1
Pin C2/P1
Net N2 2 M1
Pin C1/P2
Pin C3/P1
Net N3 2 NoCstr
Pin C3/P2
Pin C4/P1
NumRoutes 7
1 1 1 1 2 1 N1
1 2 1 1 4 1 N1
1 1 1 1 1 2 N1
1 1 2 1 4 2 N1
1 1 1 3 1 1 N2
3 1 1 3 2 1 N2
3 1 1 5 5 1 N3
"""


@pytest.fixture
def design_text() -> str:
    return SAMPLE_DESIGN


@pytest.fixture
def design_file(tmp_path):
    path = tmp_path / "case.txt"
    path.write_text(SAMPLE_DESIGN)
    return path
