# -- LED Frame Visualizations -- #

'''
Plotly plots of brightness frames and run diagnostics.

Grids are drawn with row 0 at the bottom, matching the simulation's
y axis.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ledFluidSim.visualization import theme


def _heatmap(frame: np.ndarray) -> go.Heatmap:
    return go.Heatmap(
        z=np.asarray(frame, dtype=int),
        zmin=0, zmax=255,
        colorscale=theme.LED_COLORSCALE,
        xgap=2, ygap=2,
        showscale=False,
    )


def plotFrame(frame: np.ndarray, title: str = 'LED Frame') -> go.Figure:
    '''
    Single brightness grid as a heatmap of LED cells.

    Parameters:
    -----------
    frame : np.ndarray
        Brightness grid, shape (rows, cols)
    title : str
        Figure title

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    rows, cols = np.shape(frame)

    fig = go.Figure(_heatmap(frame))
    fig.update_layout(
        title=title,
        xaxis=dict(title='Column', range=[-0.5, cols - 0.5]),
        yaxis=dict(title='Row', range=[-0.5, rows - 0.5], scaleanchor='x', scaleratio=1),
        template=theme.TEMPLATE,
        height=120 + 40 * rows,
    )

    return fig


def plotFrameAnimation(
    frames: Sequence[np.ndarray],
    stepLabels: Sequence[int] | None = None,
    frameDurationMs: int = 50,
) -> go.Figure:
    '''
    Animated heatmap of a sequence of brightness grids with a step slider.

    Parameters:
    -----------
    frames : Sequence[np.ndarray]
        Brightness grids, all the same shape
    stepLabels : Sequence[int] | None
        Label per frame (defaults to the frame index)
    frameDurationMs : int
        Playback time per frame [ms]

    Returns:
    --------
    go.Figure : Plotly figure with play / pause buttons
    '''
    if len(frames) == 0:
        raise ValueError('Need at least one frame to animate')
    if stepLabels is None:
        stepLabels = list(range(len(frames)))

    rows, cols = np.shape(frames[0])

    fig = go.Figure(
        data=[_heatmap(frames[0])],
        frames=[
            go.Frame(data=[_heatmap(f)], name=str(label))
            for f, label in zip(frames, stepLabels)
        ],
    )

    playArgs = dict(frame=dict(duration=frameDurationMs, redraw=True), fromcurrent=True)
    pauseArgs = dict(frame=dict(duration=0, redraw=False), mode='immediate')

    fig.update_layout(
        title='LED Frames',
        xaxis=dict(title='Column', range=[-0.5, cols - 0.5]),
        yaxis=dict(title='Row', range=[-0.5, rows - 0.5], scaleanchor='x', scaleratio=1),
        template=theme.TEMPLATE,
        height=200 + 40 * rows,
        updatemenus=[dict(
            type='buttons',
            showactive=False,
            buttons=[
                dict(label='Play', method='animate', args=[None, playArgs]),
                dict(label='Pause', method='animate', args=[[None], pauseArgs]),
            ],
        )],
        sliders=[dict(
            currentvalue=dict(prefix='Step: '),
            steps=[
                dict(label=str(label), method='animate', args=[[str(label)], pauseArgs])
                for label in stepLabels
            ],
        )],
    )

    return fig


def plotDiagnostics(diagnostics: dict[str, list]) -> go.Figure:
    '''
    Run diagnostics over time: max speed, mean density, lit cells.

    Parameters:
    -----------
    diagnostics : dict[str, list]
        History as produced by FrameExporter.diagnostics

    Returns:
    --------
    go.Figure : Plotly figure with 3 stacked subplots
    '''
    steps = diagnostics['steps']

    fig = make_subplots(
        rows=3, cols=1,
        shared_xaxes=True,
        subplot_titles=('Max Speed', 'Mean Density', 'Lit Cells'),
        vertical_spacing=0.08,
    )

    fig.add_trace(
        go.Scatter(x=steps, y=diagnostics['maxSpeed'], mode='lines',
                   line=dict(color=theme.RED, width=2)),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(x=steps, y=diagnostics['meanDensity'], mode='lines',
                   line=dict(color=theme.BLUE, width=2)),
        row=2, col=1,
    )
    fig.add_trace(
        go.Scatter(x=steps, y=diagnostics['litCells'], mode='lines',
                   line=dict(color=theme.GREEN, width=2)),
        row=3, col=1,
    )

    fig.update_xaxes(title_text='Step', row=3, col=1)
    fig.update_layout(
        title='Run Diagnostics',
        template=theme.TEMPLATE,
        height=650,
        showlegend=False,
    )

    return fig
