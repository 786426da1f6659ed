# -- External Interface Protocols -- #

'''
Call contracts between the simulation core and its surroundings.

A ForceSource supplies the external force (gravity analog) once per
tick; a FrameSink receives each quantized brightness grid. Concrete
hardware transports (serial framing, packet decoding) implement these
outside this package.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np

from ledFluidSim.sph.protocols import ExternalForce


class ForceSource(Protocol):
    '''Protocol for per-tick external force providers.'''

    def read(self) -> ExternalForce | None:
        '''
        Return a new force sample, or None if nothing new arrived.

        On None the caller keeps applying the previous force.
        '''
        ...


class FrameSink(Protocol):
    '''Protocol for consumers of brightness grids.'''

    def send(self, frame: np.ndarray) -> None:
        '''
        Deliver one brightness grid.

        Parameters:
        -----------
        frame : np.ndarray
            Brightness grid, shape (rows, cols), dtype uint8
        '''
        ...
