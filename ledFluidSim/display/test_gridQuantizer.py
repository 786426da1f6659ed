# -- Grid Quantizer Tests -- #

'''
Binning, saturation, off-grid handling, and purity of the brightness
quantizer, plus the terminal renderer.

Sean Bowman [10/19/2026]
'''

import numpy as np
import pytest

from ledFluidSim.display.gridQuantizer import GridConfig, GridQuantizer, quantizePositions
from ledFluidSim.display.terminalRender import renderFrame

ORIGIN = (-0.8, 0.0)
CELL = 0.1


def cellCenter(row, col):
    '''Domain coordinates of the center of a grid cell.'''
    return [ORIGIN[0] + (col + 0.5) * CELL, ORIGIN[1] + (row + 0.5) * CELL]


def quantize(positions, binCount):
    return quantizePositions(positions, 9, 16, CELL, ORIGIN, binCount)


def testBinaryBinsAreOnOff():
    positions = [cellCenter(0, 0)] + [cellCenter(4, 7)] * 3
    grid = quantize(positions, binCount=2)

    assert grid.shape == (9, 16)
    assert grid.dtype == np.uint8
    assert grid[0, 0] == 255
    assert grid[4, 7] == 255
    assert np.count_nonzero(grid) == 2


def testThreeBinsUseLinearRounding():
    positions = [cellCenter(1, 1)] + [cellCenter(2, 2)] * 2 + [cellCenter(3, 3)] * 5
    grid = quantize(positions, binCount=3)

    # round(1 * 255 / 2) = round(127.5) = 128
    assert grid[1, 1] == 128
    assert grid[2, 2] == 255
    assert grid[3, 3] == 255
    assert grid[0, 0] == 0


def testFiveBinsGraduate():
    positions = []
    for count in range(1, 6):
        positions += [cellCenter(0, count)] * count
    grid = quantize(positions, binCount=5)

    np.testing.assert_array_equal(grid[0, :7], [0, 64, 128, 191, 255, 255, 0])


def testOffGridPositionsAreDropped():
    positions = [
        [0.85, 0.45],          # beyond +halfWidth
        [-0.81, 0.45],         # beyond -halfWidth
        [0.0, -0.01],          # below the floor
        [0.0, 0.95],           # above the top row
        [np.nan, 0.4],
        [np.inf, 0.4],
        [0.0, -np.inf],
    ]
    grid = quantize(positions, binCount=2)

    np.testing.assert_array_equal(grid, np.zeros((9, 16), dtype=np.uint8))


def testOffGridDoesNotAffectOnGridCells():
    positions = [cellCenter(8, 15), [5.0, 5.0], [-5.0, -5.0]]
    grid = quantize(positions, binCount=2)

    assert grid[8, 15] == 255
    assert np.count_nonzero(grid) == 1


def testQuantizationIsPure():
    rng = np.random.default_rng(1)
    positions = rng.uniform([-1.0, -0.1], [1.0, 1.0], size=(300, 2))
    original = positions.copy()

    first = quantize(positions, binCount=3)
    second = quantize(positions, binCount=3)

    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(positions, original)


def testFlatAndPairedInputsAgree():
    pairs = np.array([cellCenter(2, 3), cellCenter(2, 3), cellCenter(7, 10)])
    flat = pairs.ravel().tolist()

    np.testing.assert_array_equal(quantize(pairs, 3), quantize(flat, 3))


def testEmptyInputGivesDarkGrid():
    grid = quantize([], binCount=2)
    np.testing.assert_array_equal(grid, np.zeros((9, 16), dtype=np.uint8))


def testQuantizerUsesConfig():
    config = GridConfig(rows=4, cols=5, cellSize=0.2, originX=0.0, originY=0.0, binCount=2)
    quantizer = GridQuantizer(config)

    grid = quantizer.quantize([0.1, 0.1, 0.9, 0.7, 1.1, 0.1])

    assert grid.shape == (4, 5)
    assert grid[0, 0] == 255
    assert grid[3, 4] == 255
    assert GridQuantizer.litCells(grid) == 2


def testGridConfigValidation():
    with pytest.raises(ValueError):
        GridConfig(binCount=1)
    with pytest.raises(ValueError):
        GridConfig(rows=0)
    with pytest.raises(ValueError):
        GridConfig(cellSize=0.0)


def testBrightnessLevels():
    np.testing.assert_array_equal(GridConfig(binCount=2).brightnessLevels, [0, 255])
    np.testing.assert_array_equal(GridConfig(binCount=3).brightnessLevels, [0, 128, 255])


def testGridConfigFromDict():
    config = GridConfig.fromDict({'grid': {'rows': 8, 'cols': 8, 'binCount': 4}})
    assert config.shape == (8, 8)
    assert config.binCount == 4
    assert config.cellSize == GridConfig().cellSize


def testRenderFrameIsTopDown():
    frame = np.zeros((2, 3), dtype=np.uint8)
    frame[0, 0] = 255
    text = renderFrame(frame, border=False)

    assert text.split('\n') == ['   ', '@  ']


def testRenderFrameBorder():
    text = renderFrame(np.zeros((2, 3), dtype=np.uint8))
    lines = text.split('\n')

    assert lines[0] == '+---+'
    assert lines[-1] == '+---+'
    assert len(lines) == 4
