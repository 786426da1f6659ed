# -- Brightness Grid Quantizer -- #

'''
Bins particle positions into a fixed-size LED brightness grid.

Each particle falls into the cell

    col = floor((x - originX) / cellSize)
    row = floor((y - originY) / cellSize)

and positions whose cell lies outside the grid are dropped without
error. Per-cell counts are then saturated at binCount - 1 and mapped
linearly onto 0..255:

    brightness = round(min(count, binCount - 1) * 255 / (binCount - 1))

With binCount = 2 cells are strictly on/off. Quantization is a pure
function of its inputs; the quantizer keeps no history between frames.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Sequence

import numpy as np

from ledFluidSim import constants as const


######################################################################
# -- Grid Configuration -- #
######################################################################

@dataclass(frozen=True)
class GridConfig:
    '''
    LED grid geometry and brightness resolution.

    Parameters:
    -----------
    rows : int
        Number of LED rows (y direction, row 0 at originY)
    cols : int
        Number of LED columns (x direction, column 0 at originX)
    cellSize : float
        Edge length of one cell in domain units
    originX : float
        x coordinate of the grid's left edge
    originY : float
        y coordinate of the grid's bottom edge
    binCount : int
        Number of brightness levels, at least 2
    '''

    rows: int = const.ledRows
    cols: int = const.ledCols
    cellSize: float = const.ledCellSize
    originX: float = -const.simHalfWidth
    originY: float = const.simFloor
    binCount: int = const.brightnessBins

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f'Grid must have positive shape, got {self.rows}x{self.cols}')
        if self.cellSize <= 0.0:
            raise ValueError(f'cellSize must be positive, got {self.cellSize}')
        if self.binCount < 2:
            raise ValueError(f'binCount must be at least 2, got {self.binCount}')

    @property
    def shape(self) -> tuple[int, int]:
        '''(rows, cols)'''
        return (self.rows, self.cols)

    @property
    def brightnessLevels(self) -> np.ndarray:
        '''Brightness byte for each saturated count 0..binCount-1.'''
        counts = np.arange(self.binCount)
        return _countsToBrightness(counts, self.binCount)

    def toDict(self) -> dict:
        return asdict(self)

    @classmethod
    def fromDict(cls, data: dict) -> GridConfig:
        '''Build a grid configuration from the 'grid' section of a config document.'''
        gridSection = data.get('grid', {})
        return cls(
            rows=gridSection.get('rows', const.ledRows),
            cols=gridSection.get('cols', const.ledCols),
            cellSize=gridSection.get('cellSize', const.ledCellSize),
            originX=gridSection.get('originX', -const.simHalfWidth),
            originY=gridSection.get('originY', const.simFloor),
            binCount=gridSection.get('binCount', const.brightnessBins),
        )


######################################################################
# -- Quantization -- #
######################################################################

def _countsToBrightness(counts: np.ndarray, binCount: int) -> np.ndarray:
    clamped = np.minimum(counts, binCount - 1)
    return np.round(clamped * (255.0 / (binCount - 1))).astype(np.uint8)


def quantizePositions(
    positions: Sequence[float] | np.ndarray,
    gridRows: int,
    gridCols: int,
    cellSize: float,
    domainOrigin: tuple[float, float],
    binCount: int,
) -> np.ndarray:
    '''
    Quantize particle positions into a brightness grid.

    Parameters:
    -----------
    positions : Sequence[float] | np.ndarray
        Flat [x0, y0, x1, y1, ...] sequence or an (N, 2) array
    gridRows : int
        Number of grid rows
    gridCols : int
        Number of grid columns
    cellSize : float
        Cell edge length in domain units
    domainOrigin : tuple[float, float]
        (minX, minY) corner the grid starts at
    binCount : int
        Brightness levels, must be at least 2 (checked by the caller)

    Returns:
    --------
    np.ndarray : Brightness grid, shape (gridRows, gridCols), dtype uint8
    '''
    points = np.asarray(positions, dtype=float).reshape(-1, 2)
    counts = np.zeros((gridRows, gridCols), dtype=np.int64)

    if len(points) > 0:
        colF = np.floor((points[:, 0] - domainOrigin[0]) / cellSize)
        rowF = np.floor((points[:, 1] - domainOrigin[1]) / cellSize)

        # NaN fails every comparison and is dropped with the off-grid points
        onGrid = (colF >= 0) & (colF < gridCols) & (rowF >= 0) & (rowF < gridRows)
        if np.any(onGrid):
            rows = rowF[onGrid].astype(np.int64)
            cols = colF[onGrid].astype(np.int64)
            np.add.at(counts, (rows, cols), 1)

    return _countsToBrightness(counts, binCount)


class GridQuantizer:
    '''
    Quantizer bound to a validated grid configuration.

    Parameters:
    -----------
    config : GridConfig
        Grid geometry and brightness resolution
    '''

    def __init__(self, config: GridConfig) -> None:
        self._config = config

    @property
    def config(self) -> GridConfig:
        return self._config

    def quantize(self, positions: Sequence[float] | np.ndarray) -> np.ndarray:
        '''Brightness grid for the given positions (see quantizePositions).'''
        c = self._config
        return quantizePositions(
            positions,
            gridRows=c.rows,
            gridCols=c.cols,
            cellSize=c.cellSize,
            domainOrigin=(c.originX, c.originY),
            binCount=c.binCount,
        )

    @staticmethod
    def litCells(frame: np.ndarray) -> int:
        '''Number of cells with non-zero brightness.'''
        return int(np.count_nonzero(frame))
