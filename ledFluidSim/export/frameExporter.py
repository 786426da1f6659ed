# -- Brightness Frame Exporter -- #

'''
Exports LED brightness frames as JSON for offline viewing.

Collects brightness grids and solver diagnostics during a run and
writes them to a single JSON file that the plotly frame viewer (or
any other tool) can load.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from ledFluidSim.sph.protocols import SimulationState
from ledFluidSim.scenarios.ledMatrix import LedMatrixConfig


class FrameExporter:
    '''
    Collects and exports brightness frames as JSON.

    Usage:
        exporter = FrameExporter()
        # During the tick loop:
        exporter.addFrame(state, frame, forceAngle)
        # After the run:
        exporter.export(sceneConfig, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "ledFluid", "rows": 9, "cols": 16, "created": "...", ... },
        "config": { "scene": {...}, "simulation": {...}, "fluid": {...}, "grid": {...} },
        "frames": [
            { "step": 5, "forceAngle": -1.5708, "brightness": [[0, 128, ...], ...] },
            ...
        ],
        "diagnostics": {
            "steps": [...],
            "maxSpeed": [...],
            "meanDensity": [...],
            "kineticEnergy": [...],
            "litCells": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._diagnostics: dict[str, list] = {
            'steps': [],
            'maxSpeed': [],
            'meanDensity': [],
            'kineticEnergy': [],
            'litCells': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        '''Collected frame records (step, forceAngle, brightness).'''
        return self._frames

    @property
    def diagnostics(self) -> dict[str, list]:
        return self._diagnostics

    def addFrame(
        self,
        state: SimulationState,
        frame: np.ndarray,
        forceAngle: float | None = None,
    ) -> None:
        '''
        Record one brightness frame.

        Parameters:
        -----------
        state : SimulationState
            Solver diagnostics for the tick
        frame : np.ndarray
            Brightness grid, shape (rows, cols)
        forceAngle : float | None
            External force angle applied on the tick [rad]
        '''
        self._frames.append({
            'step': state.step,
            'forceAngle': None if forceAngle is None else round(forceAngle, 6),
            'brightness': np.asarray(frame, dtype=int).tolist(),
        })

        self._diagnostics['steps'].append(state.step)
        self._diagnostics['maxSpeed'].append(round(state.maxSpeed, 6))
        self._diagnostics['meanDensity'].append(round(state.meanDensity, 6))
        self._diagnostics['kineticEnergy'].append(round(state.kineticEnergy, 8))
        self._diagnostics['litCells'].append(int(np.count_nonzero(frame)))

    def frameArrays(self) -> list[np.ndarray]:
        '''Collected frames as uint8 arrays.'''
        return [np.array(f['brightness'], dtype=np.uint8) for f in self._frames]

    def export(
        self,
        sceneConfig: LedMatrixConfig,
        outputDir: str = 'output',
        scenarioName: str = 'ledMatrix',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        sceneConfig : LedMatrixConfig
            Scenario configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'ledFluid_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        output = {
            'meta': {
                'type': 'ledFluid',
                'rows': sceneConfig.grid.rows,
                'cols': sceneConfig.grid.cols,
                'binCount': sceneConfig.grid.binCount,
                'nFrames': len(self._frames),
                'nParticles': sceneConfig.particleCount,
                'created': datetime.now().isoformat(),
            },
            'config': sceneConfig.toDict(),
            'frames': self._frames,
            'diagnostics': self._diagnostics,
        }

        with open(filepath, 'w') as f:
            json.dump(output, f, indent=None, separators=(',', ':'))

        return filepath

    @staticmethod
    def load(filepath: str) -> dict:
        '''Read an exported file back into a dict.'''
        with open(filepath, 'r') as f:
            return json.load(f)
