# -- LED Fluid Runner -- #

'''
Command-line entry point for running the LED matrix fluid simulation.

Each tick reads the external force, steps the particle solver,
quantizes the visual positions into a brightness grid, and hands the
grid to the frame sinks. Progress is printed as a table; frames can
be previewed in the terminal, exported as JSON, and written out as a
plotly HTML animation.

Usage:
    python -m ledFluidSim                                   # Default 9x16, 600 ticks
    python -m ledFluidSim --preset binary --render          # On/off cells, live preview
    python -m ledFluidSim --force-source rotating --export  # Tilting box, JSON export
    python -m ledFluidSim --force-source tilt --tilt-file ledFluidSim/configs/tilt_sweep.json
    python -m ledFluidSim --config ledFluidSim/configs/led_9x16.json --plot

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import argparse
import math
import os
import time as timeModule
from typing import Sequence

from ledFluidSim.sph.protocols import ExternalForce
from ledFluidSim.scenarios.ledMatrix import LedMatrixConfig, createLedMatrixScene
from ledFluidSim.interfaces.protocols import ForceSource, FrameSink
from ledFluidSim.interfaces.forceSources import createForceSource
from ledFluidSim.interfaces.frameSinks import TerminalFrameSink
from ledFluidSim.export.frameExporter import FrameExporter


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='LedFluidSim -- particle fluid on an LED matrix',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file (overrides --preset)',
    )
    parser.add_argument(
        '--preset', type=str, default='default',
        choices=['default', 'binary', 'dense'],
        help='Scenario preset (default: default)',
    )
    parser.add_argument(
        '--ticks', type=int, default=None,
        help='Number of ticks to run (default: from scenario)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Particle spawn seed',
    )
    parser.add_argument(
        '--force-source', type=str, default='constant',
        choices=['constant', 'rotating', 'tilt'],
        help='External force provider (default: constant)',
    )
    parser.add_argument(
        '--tilt-file', type=str, default=None,
        help='JSON file of recorded tilt samples for --force-source tilt',
    )
    parser.add_argument(
        '--tilt-scales-magnitude', action='store_true',
        help='Scale the force magnitude by the tilt magnitude',
    )
    parser.add_argument(
        '--angle-deg', type=float, default=None,
        help='Force angle in degrees (start angle for rotating; default: scenario)',
    )
    parser.add_argument(
        '--magnitude', type=float, default=None,
        help='Force magnitude (default: scenario)',
    )
    parser.add_argument(
        '--rotation-deg-per-tick', type=float, default=0.5,
        help='Angle increment per tick for the rotating source (default: 0.5)',
    )
    parser.add_argument(
        '--render', action='store_true',
        help='Draw frames in the terminal',
    )
    parser.add_argument(
        '--export', action='store_true',
        help='Export frames and diagnostics as JSON',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Write a plotly HTML animation of the exported frames',
    )
    parser.add_argument(
        '--output-dir', type=str, default='ledFluidSim/output',
        help='Output directory for exports (default: ledFluidSim/output)',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class LedFluidRunner:
    '''
    Runs the tick loop and keeps the frames collected by the last run.

    Handles scenario setup, the simulate / quantize / send loop with
    progress reporting, and optional export.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        return self._exporter

    def run(
        self,
        sceneConfig: LedMatrixConfig,
        forceSource: ForceSource,
        sinks: Sequence[FrameSink] = (),
        ticks: int | None = None,
        doExport: bool = False,
        exportDir: str = 'ledFluidSim/output',
        quiet: bool = False,
    ) -> dict:
        '''
        Run an LED matrix simulation.

        Parameters:
        -----------
        sceneConfig : LedMatrixConfig
            Scenario configuration
        forceSource : ForceSource
            External force provider, read once per tick
        sinks : Sequence[FrameSink]
            Receivers of every brightness frame
        ticks : int | None
            Number of ticks (defaults to sceneConfig.ticks)
        doExport : bool
            Whether to write the collected frames as JSON
        exportDir : str
            Output directory for the export
        quiet : bool
            Suppress the progress table (banners still print unless quiet)

        Returns:
        --------
        dict : Run summary
        '''
        nTicks = sceneConfig.ticks if ticks is None else ticks
        say = (lambda *a: None) if quiet else print

        # Each run records and exports only its own frames
        self._exporter = FrameExporter()

        say()
        say('=' * 62)
        say('  LEDFLUIDSIM -- PARTICLE FLUID ON AN LED MATRIX')
        say('=' * 62)
        say()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        solver, quantizer = createLedMatrixScene(sceneConfig)
        simConfig = sceneConfig.simulation
        gridConfig = sceneConfig.grid

        say('-' * 62)
        say('  SCENARIO SETUP')
        say('-' * 62)
        say(f'  Particles:         {sceneConfig.particleCount:8d}')
        say(f'  Domain X:          [{-simConfig.halfWidth:.2f}, {simConfig.halfWidth:.2f}]')
        say(f'  Domain Y:          [{simConfig.floor:.2f}, {simConfig.ceiling:.2f}]')
        say(f'  Cutoff Radius:     {simConfig.cutoffRadius:8.4f}')
        say(f'  Stiffness K:       {simConfig.stiffness:8.2e}')
        say(f'  Near Stiffness:    {simConfig.nearStiffness:8.2e}')
        say(f'  Neighbor Search:   {simConfig.neighborSearch:>8s}')
        say(f'  LED Grid:          {gridConfig.rows:4d} x {gridConfig.cols:<4d}')
        say(f'  Brightness Levels: {gridConfig.binCount:8d}')
        say(f'  Ticks:             {nTicks:8d}')
        say()

        #--------------------------------------------------------------------#
        # Tick Loop
        #--------------------------------------------------------------------#
        showTable = not quiet and not any(isinstance(s, TerminalFrameSink) for s in sinks)
        if showTable:
            say('-' * 62)
            say('  RUNNING SIMULATION')
            say('-' * 62)
            say()
            say(f'  {"Tick":>8}  {"FPS":>8}  {"Angle":>8}  {"MaxVel":>8}  {"Density":>8}  {"Lit":>6}')
            say(f'  {"":>8}  {"":>8}  {"(deg)":>8}  {"":>8}  {"(mean)":>8}  {"cells":>6}')
            say('  ' + '-' * 56)

        currentForce = ExternalForce(simConfig.forceMagnitude, simConfig.forceAngle)
        printInterval = max(1, nTicks // 20)

        wallClockStart = timeModule.time()
        windowStart = wallClockStart
        windowFrames = 0
        fps = 0.0
        frame = None

        for tick in range(1, nTicks + 1):
            newForce = forceSource.read()
            if newForce is not None:
                currentForce = newForce

            solver.step(currentForce.magnitude, currentForce.angle)
            frame = quantizer.quantize(solver.getVisualPositions())

            for sink in sinks:
                sink.send(frame)

            if tick % sceneConfig.exportInterval == 0:
                self._exporter.addFrame(solver.currentState, frame, currentForce.angle)

            windowFrames += 1
            now = timeModule.time()
            if now - windowStart >= 1.0:
                fps = windowFrames / (now - windowStart)
                windowFrames = 0
                windowStart = now

            if showTable and (tick % printInterval == 0 or tick == nTicks):
                state = solver.currentState
                say(
                    f'  {tick:8d}  {fps:8.1f}  {math.degrees(currentForce.angle):8.1f}  '
                    f'{state.maxSpeed:8.4f}  {state.meanDensity:8.3f}  '
                    f'{quantizer.litCells(frame):6d}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart
        finalState = solver.currentState

        say()
        say(f'  Simulation complete.')
        say(f'  Total ticks:       {finalState.step:8d}')
        say(f'  Wall-clock time:   {wallClockSeconds:8.2f} s')
        if wallClockSeconds > 0.0:
            say(f'  Average FPS:       {finalState.step / wallClockSeconds:8.1f}')
        say(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        say()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            say('-' * 62)
            say('  EXPORTING FRAME DATA')
            say('-' * 62)

            exportPath = self._exporter.export(
                sceneConfig=sceneConfig,
                outputDir=exportDir,
            )
            say(f'  Exported to: {exportPath}')
            say()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        say('=' * 62)
        say('  RUN SUMMARY')
        say('=' * 62)
        say(f'  Max Speed:         {finalState.maxSpeed:10.6f}')
        say(f'  Mean Density:      {finalState.meanDensity:10.6f}')
        say(f'  Max Density:       {finalState.maxDensity:10.6f}')
        say(f'  Particles Outside: {finalState.nOutside:10d}')
        if frame is not None:
            say(f'  Lit Cells:         {quantizer.litCells(frame):10d}')
        say('=' * 62)
        say()

        return {
            'finalState': finalState,
            'finalFrame': frame,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
        }

    def writeAnimation(self, outputDir: str) -> list[str]:
        '''
        Write the recorded frames as a plotly HTML animation, plus the
        diagnostics history plot.

        Returns:
        --------
        list[str] : Paths to the HTML files
        '''
        from ledFluidSim.visualization.framePlots import plotFrameAnimation, plotDiagnostics

        os.makedirs(outputDir, exist_ok=True)
        fig = plotFrameAnimation(
            self._exporter.frameArrays(),
            stepLabels=self._exporter.diagnostics['steps'],
        )
        framesPath = os.path.join(outputDir, 'ledFluid_frames.html')
        fig.write_html(framesPath)

        diagPath = os.path.join(outputDir, 'ledFluid_diagnostics.html')
        plotDiagnostics(self._exporter.diagnostics).write_html(diagPath)

        return [framesPath, diagPath]


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: Sequence[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    if args.force_source == 'tilt' and args.tilt_file is None:
        parser.error('--force-source tilt requires --tilt-file')

    if args.config:
        sceneConfig = LedMatrixConfig.fromJson(args.config)
    else:
        presets = {
            'default': LedMatrixConfig.default9x16,
            'binary': LedMatrixConfig.binary9x16,
            'dense': LedMatrixConfig.dense9x16,
        }
        sceneConfig = presets[args.preset]()

    if args.seed is not None:
        sceneConfig.seed = args.seed

    simConfig = sceneConfig.simulation
    magnitude = simConfig.forceMagnitude if args.magnitude is None else args.magnitude
    angle = simConfig.forceAngle if args.angle_deg is None else math.radians(args.angle_deg)

    forceSource = createForceSource(
        args.force_source,
        magnitude=magnitude,
        angle=angle,
        ratePerTick=math.radians(args.rotation_deg_per_tick),
        tiltFile=args.tilt_file,
        tiltScalesMagnitude=args.tilt_scales_magnitude,
    )

    sinks: list[FrameSink] = []
    if args.render:
        sinks.append(TerminalFrameSink())

    runner = LedFluidRunner()
    runner.run(
        sceneConfig,
        forceSource,
        sinks=sinks,
        ticks=args.ticks,
        doExport=args.export,
        exportDir=args.output_dir,
    )

    if args.plot and runner.exporter.nFrames == 0:
        print('  No frames recorded; skipping plots.')
    elif args.plot:
        for htmlPath in runner.writeAnimation(args.output_dir):
            print(f'  Plot written to: {htmlPath}')


if __name__ == '__main__':
    main()
