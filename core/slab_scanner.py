"""
Slab scanner: scores candidate membrane slabs along sphere axes
"""

import math

import numpy as np

from .data_models import (
    AnvilConfig,
    HydrophobicityStats,
    MembraneCandidate,
    ResidueSamples,
    Slice,
)
from .exceptions import NoMembraneFoundError
from .parallel import ParallelAxisScan
from .runtime import RuntimeContext

# Reference count guards for the Q-score denominator:
# no exposed hydrophobic residues -> the hydrophobic count is floored at 0.1
HYDROPHOBIC_FLOOR = 0.1
# no exposed hydrophilic residues -> one hydrophilic residue is added
HYDROPHILIC_OFFSET = 1.0


def adjusted_reference(reference: HydrophobicityStats) -> tuple[float, float]:
    """Global hydrophobic/hydrophilic counts with the zero-count guards applied"""
    g_hphob = float(reference.hphob)
    g_hphil = float(reference.hphil)
    if g_hphob < 1:
        g_hphob = HYDROPHOBIC_FLOOR
    if g_hphil < 1:
        g_hphil += HYDROPHILIC_OFFSET
    return g_hphob, g_hphil


def q_value(hphob, hphil, reference: HydrophobicityStats):
    """
    ANVIL Q-score of a slab

    Q = [H (Gl - L) - L (Gb - H)] / (T Gb Gl (Gt - T))

    with H/L the slab's hydrophobic/hydrophilic counts, T = H + L, and
    Gb/Gl/Gt the (guarded) counts over all exposed residues. Accepts scalars
    or numpy arrays; a zero denominator yields inf or nan instead of raising.
    """
    g_hphob, g_hphil = adjusted_reference(reference)
    tot = g_hphob + g_hphil
    hphob = np.asarray(hphob, dtype=float)
    hphil = np.asarray(hphil, dtype=float)
    part_tot = hphob + hphil

    with np.errstate(divide="ignore", invalid="ignore"):
        q = (hphob * (g_hphil - hphil) - hphil * (g_hphob - hphob)) / (
            part_tot * g_hphob * g_hphil * (tot - part_tot)
        )
    return q if q.ndim else float(q)


def window_sizes(step_size: float, min_thickness: float, max_thickness: float) -> list[int]:
    """
    Number of slices summed per window, one entry per candidate width

    The first size is floor(min_thickness / step_size) - 1 and sizes grow by
    one while (size + 1) * step_size stays below max_thickness.
    """
    jmax = int(math.floor(min_thickness / step_size + 1e-9)) - 1
    sizes = []
    while True:
        sizes.append(jmax)
        jmax += 1
        if (jmax + 1) * step_size >= max_thickness:
            break
    return sizes


def select_membrane(
    initial: MembraneCandidate,
    refined: MembraneCandidate | None,
) -> MembraneCandidate:
    """Higher scoring candidate; ties keep the initial pass"""
    if refined is not None and refined.qmax > initial.qmax:
        return refined
    return initial


class SlabScanner:
    """
    Scores slabs perpendicular to candidate axes

    Every axis runs from a sphere point through the centroid to the opposite
    side of the sphere. The span is cut into slices of `step_size`, exposed
    residues are counted per slice, and windows of consecutive slices are
    scored with the Q-score against the counts over all exposed residues.
    """

    def __init__(
        self,
        samples: ResidueSamples,
        centroid: np.ndarray,
        config: AnvilConfig | None = None,
        reference: HydrophobicityStats | None = None,
    ):
        """
        Args:
            samples: Residue samples (only exposed ones are scored)
            centroid: Centroid of all samples
            config: Search parameters
            reference: Global counts; defaults to all exposed samples
        """
        self.config = config or AnvilConfig()
        self.centroid = np.asarray(centroid, dtype=float)
        self.step_size = float(self.config.step_size)
        self.reference = reference or HydrophobicityStats.from_samples(samples)

        exposed = samples.exposed
        self._coords = samples.coords[exposed]
        self._hydrophobic = samples.hydrophobic[exposed]
        self._sizes = np.array(
            window_sizes(self.step_size, self.config.min_thickness, self.config.max_thickness),
            dtype=int,
        )

    def slice_offsets(self, diameter_norm: float) -> list[float]:
        """Offsets t = 0, step, 2 step, ... while t < diameter_norm - step"""
        offsets = []
        t = 0.0
        limit = diameter_norm - self.step_size
        while t < limit:
            offsets.append(t)
            t += self.step_size
        return offsets

    def _slice_boundaries(self, axis_point: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Boundary points of all slices along one axis

        Returns:
            (diameter, points): points has shape (n_slices + 1, 3); slice k
            is bounded by points[k] and points[k + 1]
        """
        diam = 2 * (self.centroid - axis_point)
        diam_norm = float(np.linalg.norm(diam))
        offsets = self.slice_offsets(diam_norm)
        if not offsets:
            return diam, np.empty((0, 3), dtype=float)

        bounds = np.array(offsets + [offsets[-1] + self.step_size], dtype=float)
        points = axis_point[None, :] + diam[None, :] * (bounds / diam_norm)[:, None]
        return diam, points

    @staticmethod
    def _project(points: np.ndarray, diam: np.ndarray) -> np.ndarray:
        return points[:, 0] * diam[0] + points[:, 1] * diam[1] + points[:, 2] * diam[2]

    def slice_counts(self, axis_point: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Exposed hydrophobic/hydrophilic counts per slice

        A residue belongs to a slice when its projection on the diameter lies
        strictly between the projections of the slice's boundary points.

        Returns:
            (points, hphob, hphil): boundary points (n_slices + 1, 3) and
            counts of shape (n_slices,)
        """
        axis_point = np.asarray(axis_point, dtype=float)
        diam, points = self._slice_boundaries(axis_point)
        n_slices = max(len(points) - 1, 0)
        if n_slices == 0 or len(self._coords) == 0:
            zeros = np.zeros(n_slices, dtype=float)
            return points, zeros, zeros.copy()

        bounds = self._project(points, diam)
        proj = self._project(self._coords, diam)

        idx = np.searchsorted(bounds, proj, side="right")
        inside = (idx >= 1) & (idx <= n_slices)
        slice_idx = np.where(inside, idx - 1, 0)
        # residues exactly on a boundary belong to no slice
        inside &= bounds[slice_idx] < proj

        hphob = np.bincount(
            slice_idx[inside & self._hydrophobic], minlength=n_slices
        ).astype(float)
        hphil = np.bincount(
            slice_idx[inside & ~self._hydrophobic], minlength=n_slices
        ).astype(float)
        return points, hphob, hphil

    def slices(self, axis_point: np.ndarray) -> list[Slice]:
        """All slices along one axis"""
        points, hphob, hphil = self.slice_counts(axis_point)
        return [
            Slice(
                plane_point1=points[k],
                plane_point2=points[k + 1],
                stats=HydrophobicityStats.of(float(hphob[k]), float(hphil[k])),
            )
            for k in range(len(hphob))
        ]

    @staticmethod
    def _window_sums(counts: np.ndarray, sizes: np.ndarray, starts: np.ndarray) -> np.ndarray:
        """Trapezoidal window sums: first and last slice count half"""
        n_slices = len(counts)
        cumulative = np.concatenate(([0.0], np.cumsum(counts)))
        ends = np.minimum(starts[None, :] + sizes[:, None], n_slices)
        lasts = np.minimum(starts[None, :] + sizes[:, None] - 1, n_slices - 1)
        full = cumulative[ends] - cumulative[starts][None, :]
        first = counts[starts][None, :]
        last = counts[lasts]
        return np.where(sizes[:, None] > 1, full - 0.5 * first - 0.5 * last, 0.5 * first)

    def scan_axis(self, axis_point: np.ndarray, axis_index: int = 0) -> MembraneCandidate | None:
        """
        Best slab along one axis

        Windows are visited width by width, start by start; the first window
        reaching the highest positive Q wins.

        Returns:
            MembraneCandidate | None: None if no window scores above zero
        """
        axis_point = np.asarray(axis_point, dtype=float)
        points, hphob, hphil = self.slice_counts(axis_point)
        n_slices = len(hphob)
        if n_slices == 0:
            return None

        sizes = self._sizes
        starts = np.arange(n_slices)
        valid = starts[None, :] < (n_slices - 1 - sizes)[:, None]
        if not valid.any():
            return None

        w_hphob = self._window_sums(hphob, sizes, starts)
        w_hphil = self._window_sums(hphil, sizes, starts)
        q = q_value(w_hphob, w_hphil, self.reference)

        scored = valid & (w_hphob != 0) & np.isfinite(q) & (q > 0)
        if not scored.any():
            return None

        best = int(np.argmax(np.where(scored, q, -np.inf)))
        row, start = divmod(best, n_slices)
        jmax = int(sizes[row])
        stats = HydrophobicityStats.of(
            float(w_hphob[row, start]),
            float(w_hphil[row, start]),
            float(w_hphob[row, start] + w_hphil[row, start]),
        )
        return MembraneCandidate(
            plane_point1=points[start].copy(),
            plane_point2=points[start + jmax + 1].copy(),
            normal_vector=axis_point - self.centroid,
            axis_point=axis_point.copy(),
            centroid=self.centroid.copy(),
            stats=stats,
            qmax=float(q[row, start]),
            axis_index=axis_index,
            window_start=start,
            window_slices=jmax,
        )

    def find_membrane(
        self,
        axis_points: np.ndarray,
        runtime: RuntimeContext | None = None,
        message: str = "Scanning axes",
    ) -> MembraneCandidate:
        """
        Best slab over a set of axes

        Axis results are reduced in axis order, so among equal scores the
        lowest axis index wins regardless of how the axes were scheduled.

        Raises:
            NoMembraneFoundError: No axis produced a positive score
        """
        scan = ParallelAxisScan(self.config.num_processes)
        results = scan.map(self.scan_axis, axis_points, runtime=runtime, message=message)

        membrane = None
        for candidate in results:
            if candidate is None:
                continue
            if membrane is None or candidate.qmax > membrane.qmax:
                membrane = candidate

        if membrane is None:
            raise NoMembraneFoundError(
                f"No membrane slab scored above zero over {len(axis_points)} axes"
            )
        return membrane
