# -- Neighbor Pair Search -- #

'''
Neighbor pair search backends for the particle simulation.

Each backend finds every unordered particle pair (i, j), i < j, whose
separation is strictly less than the cutoff radius. Pairs come back
as two index arrays sorted by (i, j), so each in-range pair is visited
exactly once and the solver's scatter-adds run in a deterministic
order regardless of backend.

Backends:
    - BruteForcePairSearch: all N(N-1)/2 pairs, vectorized (small N)
    - SpatialHashGrid: cell-linked list with a half stencil
    - KdTreePairSearch: scipy cKDTree range query

References:
-----------
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np
from scipy.spatial import cKDTree


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor pair search algorithms.'''

    def build(self, positions: np.ndarray) -> None:
        '''Build the search structure from particle positions.'''
        ...

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all particle pairs closer than the given radius.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices), each pair once with i < j
        '''
        ...


def _emptyPairs() -> tuple[np.ndarray, np.ndarray]:
    return (np.array([], dtype=np.int64), np.array([], dtype=np.int64))


def _sortedPairs(iIdx: np.ndarray, jIdx: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    '''Order pairs so that i < j and sort them lexicographically by (i, j).'''
    lo = np.minimum(iIdx, jIdx).astype(np.int64)
    hi = np.maximum(iIdx, jIdx).astype(np.int64)
    order = np.lexsort((hi, lo))
    return (lo[order], hi[order])


#--------------------------------------------------------------------#
# -- Brute Force -- #
#--------------------------------------------------------------------#

class BruteForcePairSearch:
    '''
    Exhaustive pair search over the upper triangle of the distance matrix.

    Quadratic in particle count, which is fine for the few hundred
    particles an LED matrix needs.
    '''

    def __init__(self) -> None:
        self._positions: np.ndarray | None = None

    def build(self, positions: np.ndarray) -> None:
        self._positions = positions

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        if self._positions is None or len(self._positions) < 2:
            return _emptyPairs()

        positions = self._positions
        rowIdx, colIdx = np.triu_indices(len(positions), k=1)
        diff = positions[colIdx] - positions[rowIdx]
        dist = np.sqrt(np.sum(diff * diff, axis=1))

        withinRadius = dist < radius
        return (rowIdx[withinRadius].astype(np.int64), colIdx[withinRadius].astype(np.int64))


#--------------------------------------------------------------------#
# -- Spatial Hash Grid -- #
#--------------------------------------------------------------------#

class SpatialHashGrid:
    '''
    Uniform grid spatial hashing for 2D neighbor search.

    Cell size equals the cutoff radius, so a particle's neighbors lie
    in its own cell or one of the 8 adjacent cells. Only the half
    stencil is traversed so that each cross-cell pair is found once.
    Negative coordinates are handled by flooring to signed cell keys.

    Parameters:
    -----------
    cellSize : float
        Grid cell size, should be at least the query radius
    '''

    # Positive half of the 3x3 stencil
    _halfStencil: tuple[tuple[int, int], ...] = ((1, -1), (1, 0), (1, 1), (0, 1))

    def __init__(self, cellSize: float) -> None:
        self._cellSize = cellSize
        self._positions: np.ndarray | None = None
        self._cells: dict[tuple[int, int], np.ndarray] = {}

    def build(self, positions: np.ndarray) -> None:
        '''
        Bin all particles into grid cells.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        '''
        self._positions = positions
        self._cells.clear()

        cellIndices = np.floor(positions / self._cellSize).astype(np.int64)

        cellDict: dict[tuple[int, int], list[int]] = {}
        for i in range(len(positions)):
            key = (int(cellIndices[i, 0]), int(cellIndices[i, 1]))
            cellDict.setdefault(key, []).append(i)

        self._cells = {k: np.array(v, dtype=np.int64) for k, v in cellDict.items()}

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all unique pairs (i, j) closer than radius.

        Parameters:
        -----------
        radius : float
            Search radius, must not exceed the cell size

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (iIndices, jIndices), sorted, i < j
        '''
        if self._positions is None:
            return _emptyPairs()

        positions = self._positions
        iChunks: list[np.ndarray] = []
        jChunks: list[np.ndarray] = []

        for cellKey, cellParticles in self._cells.items():
            cellPos = positions[cellParticles]

            # --- Pairs within the same cell --- #
            nCell = len(cellParticles)
            if nCell > 1:
                rowIdx, colIdx = np.triu_indices(nCell, k=1)
                diff = cellPos[colIdx] - cellPos[rowIdx]
                dist = np.sqrt(np.sum(diff * diff, axis=1))
                withinRadius = dist < radius
                if np.any(withinRadius):
                    iChunks.append(cellParticles[rowIdx[withinRadius]])
                    jChunks.append(cellParticles[colIdx[withinRadius]])

            # --- Pairs with neighbor cells (half stencil) --- #
            for dx, dy in self._halfStencil:
                neighborParticles = self._cells.get((cellKey[0] + dx, cellKey[1] + dy))
                if neighborParticles is None:
                    continue

                neighborPos = positions[neighborParticles]
                diff = cellPos[:, np.newaxis, :] - neighborPos[np.newaxis, :, :]
                dist = np.sqrt(np.sum(diff * diff, axis=2))

                localI, localJ = np.where(dist < radius)
                if len(localI) > 0:
                    iChunks.append(cellParticles[localI])
                    jChunks.append(neighborParticles[localJ])

        if not iChunks:
            return _emptyPairs()

        return _sortedPairs(np.concatenate(iChunks), np.concatenate(jChunks))


#--------------------------------------------------------------------#
# -- KD-Tree -- #
#--------------------------------------------------------------------#

class KdTreePairSearch:
    '''
    Pair search backed by scipy's cKDTree.

    cKDTree.query_pairs includes pairs at exactly the radius, so the
    result is filtered again with a strict comparison.

    cKDTree rejects non-finite data, so the tree holds only the finite
    rows. A diverged particle has no neighbors, the same as in the
    other backends.
    '''

    def __init__(self) -> None:
        self._positions: np.ndarray | None = None
        self._treeIndex: np.ndarray = np.array([], dtype=np.int64)
        self._tree: cKDTree | None = None

    def build(self, positions: np.ndarray) -> None:
        self._positions = positions
        finite = np.isfinite(positions).all(axis=1)
        self._treeIndex = np.flatnonzero(finite).astype(np.int64)
        self._tree = cKDTree(positions[finite]) if len(self._treeIndex) > 0 else None

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        if self._tree is None:
            return _emptyPairs()

        pairs = self._tree.query_pairs(radius, output_type='ndarray')
        if len(pairs) == 0:
            return _emptyPairs()

        # Tree rows back to particle indices
        iIdx, jIdx = _sortedPairs(self._treeIndex[pairs[:, 0]], self._treeIndex[pairs[:, 1]])
        diff = self._positions[jIdx] - self._positions[iIdx]
        dist = np.sqrt(np.sum(diff * diff, axis=1))
        withinRadius = dist < radius

        return (iIdx[withinRadius], jIdx[withinRadius])


#--------------------------------------------------------------------#
# -- Factory -- #
#--------------------------------------------------------------------#

def createNeighborSearch(searchType: str, cutoffRadius: float) -> NeighborSearch:
    '''
    Create a neighbor search backend by name.

    Parameters:
    -----------
    searchType : str
        'bruteForce', 'hashGrid' or 'kdTree'
    cutoffRadius : float
        Interaction radius (hash grid cell size)

    Returns:
    --------
    NeighborSearch : Search backend instance

    Raises:
    -------
    ValueError : If the search type is unknown
    '''
    if searchType == 'bruteForce':
        return BruteForcePairSearch()
    elif searchType == 'hashGrid':
        return SpatialHashGrid(cellSize=cutoffRadius)
    elif searchType == 'kdTree':
        return KdTreePairSearch()
    else:
        raise ValueError(f'Unknown neighbor search type: {searchType}')
