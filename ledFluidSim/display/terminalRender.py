# -- Terminal Frame Rendering -- #

'''
Text rendering of brightness grids for a console preview.

Row 0 of a grid is the bottom of the domain, so rows are printed
top-down in reverse order to keep "up" pointing up on screen.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

# Darkest to brightest
SHADES = ' .:-=+*#%@'


def renderFrame(frame: np.ndarray, shades: str = SHADES, border: bool = True) -> str:
    '''
    Render a brightness grid as shade characters.

    Parameters:
    -----------
    frame : np.ndarray
        Brightness grid, shape (rows, cols), values 0..255
    shades : str
        Characters ordered from dark to bright
    border : bool
        Draw a box around the grid

    Returns:
    --------
    str : Multi-line string, one line per grid row
    '''
    levels = len(shades) - 1
    indices = np.round(np.asarray(frame, dtype=float) / 255.0 * levels).astype(int)

    lines = [''.join(shades[k] for k in row) for row in indices[::-1]]

    if border:
        width = frame.shape[1]
        lines = ['+' + '-' * width + '+'] + [f'|{line}|' for line in lines] + ['+' + '-' * width + '+']

    return '\n'.join(lines)
