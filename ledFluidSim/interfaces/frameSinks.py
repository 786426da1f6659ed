# -- Frame Sinks -- #

'''
In-process consumers of brightness grids.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np

from ledFluidSim.display.terminalRender import renderFrame


class RecordingFrameSink:
    '''
    Keeps copies of received frames in memory.

    Parameters:
    -----------
    maxFrames : int | None
        Keep only the most recent maxFrames frames (None keeps all)
    '''

    def __init__(self, maxFrames: int | None = None) -> None:
        self._maxFrames = maxFrames
        self._frames: list[np.ndarray] = []

    @property
    def frames(self) -> list[np.ndarray]:
        return self._frames

    @property
    def nFrames(self) -> int:
        return len(self._frames)

    def send(self, frame: np.ndarray) -> None:
        self._frames.append(np.array(frame, dtype=np.uint8, copy=True))
        if self._maxFrames is not None and len(self._frames) > self._maxFrames:
            del self._frames[0]


class TerminalFrameSink:
    '''
    Draws each frame to a text stream as shade characters.

    When the stream is a TTY the cursor is moved back up before each
    frame so the preview animates in place.

    Parameters:
    -----------
    stream : TextIO | None
        Output stream (defaults to sys.stdout)
    everyNth : int
        Draw only every n-th frame received
    '''

    def __init__(self, stream: TextIO | None = None, everyNth: int = 1) -> None:
        self._stream = stream or sys.stdout
        self._everyNth = max(1, everyNth)
        self._received = 0
        self._linesDrawn = 0

    def send(self, frame: np.ndarray) -> None:
        self._received += 1
        if (self._received - 1) % self._everyNth != 0:
            return

        text = renderFrame(frame)
        if self._linesDrawn and self._stream.isatty():
            self._stream.write(f'\x1b[{self._linesDrawn}F')
        self._stream.write(text + '\n')
        self._stream.flush()
        self._linesDrawn = text.count('\n') + 1
