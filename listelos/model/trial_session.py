"""
lisTELOS trial session: the derivative function and its saccade controller.

A ``TrialSession`` holds everything about one trial that is not integrated:
the eye position, the time of the last saccade, whether a saccade is under
way, the counting-cell vector and the saccade log. ``derivative(t, y)`` reads
and updates that state as a side effect, so one session must be used for
exactly one integration, in increasing time order.

All times inside the session are in internal units.
"""

import numpy as np
from tqdm import tqdm
from typing import List, Optional

from .inputs import sample_index
from .signal_functions import (
    f, f1, f2, f3, f4, f5, f6, f7, f8, f10, g, rectify, sum_over_others,
)
from .field_layout import UNRECTIFIED


# Colliculus activity above this commits a saccade
SACCADE_THRESHOLD = 0.3

# Resting value the BG direct and indirect nodes decay towards
BG_REST = 0.58

# LIP activity below this does not reach the basal ganglia
LIP_BG_THRESHOLD = 0.25

# Nigral output above this inhibits its target: the thalamic gates R and T
# open below it, and the colliculus is held down by the excess over it
NIGRAL_GATE_THRESHOLD = 0.3

# Fraction of a step within which a time counts as lying on the sample grid
GRID_TOLERANCE = 1e-6


class SaccadeLog:
    """Append-only record of the saccades made in one trial."""

    def __init__(self):
        self.times: List[float] = []
        self.targets: List[int] = []
        self.outcomes: List[str] = []

    def append(self, t, target, outcome=""):
        self.times.append(t)
        self.targets.append(target)
        self.outcomes.append(outcome)

    def __len__(self):
        return len(self.times)

    def __repr__(self):
        return f"SaccadeLog({list(zip(self.times, self.targets))})"


class TrialSession:
    """
    Discrete state and derivative function for one lisTELOS trial.

    Args:
        layout (FieldLayout): State vector layout
        input_signal (np.ndarray): (n_steps + 1, n_cells) head-centred visual input
        stimulation (np.ndarray): (n_cells * count_cells, n_steps + 1) microstimulation
        remap (RemapOperator): Reference-frame shifts
        step (float): Integration step (internal units)
        fix_location (int): Fixation location (1-based)
        cue_locations (list): Location of every cue (1-based)
        cue_on_times (list): Onset of every cue (internal units)
        use_wm (bool): Whether parietal output loads working memory
        rng (np.random.Generator): Noise source for working memory
        verbose (bool): Print saccade events as they happen
        time_scale (float): Internal units per second, used to print times in seconds
    """

    def __init__(self, layout, input_signal, stimulation, remap, step, fix_location,
                 cue_locations, cue_on_times, use_wm=True, rng=None, verbose=False, time_scale=1.0):
        self.layout = layout
        self.input_signal = input_signal
        self.stimulation = stimulation
        self.remap = remap
        self.step = step
        self.fix_location = int(fix_location)
        self.use_wm = use_wm
        self.rng = rng if rng is not None else np.random.default_rng()
        self.verbose = verbose
        self.time_scale = time_scale

        self.n_cells = layout.n_cells
        self.count_cells = layout.count_cells
        self.n_samples = input_signal.shape[0]

        if input_signal.shape[1] != self.n_cells:
            raise ValueError(f"Input signal has {input_signal.shape[1]} cells, layout has {self.n_cells}")
        if stimulation.shape != (self.n_cells * self.count_cells, self.n_samples):
            raise ValueError(
                f"Stimulation shape {stimulation.shape} does not match "
                f"({self.n_cells * self.count_cells}, {self.n_samples})"
            )

        # Onset sample of each non-fixation cue -> its ordinal rank.
        # The first cue wins when several start on the same sample.
        self.rank_onsets = {}
        rank = 0
        for loc, on in zip(cue_locations, cue_on_times):
            if int(loc) == self.fix_location:
                continue
            self.rank_onsets.setdefault(sample_index(on, step), rank)
            rank += 1
        if rank > self.count_cells:
            raise ValueError(f"{rank} non-fixation cues but only {self.count_cells} counting cells")

        # Zero at the fixation cell. Nulls the fixation point on the parietal -> WM
        # pathway, and spreads fixation-cell LIP activity to every other cell.
        self.no_fp = np.ones(self.n_cells)
        self.no_fp[self.fix_location - 1] = 0.0

        # --- Session State ---
        self.eye_position = self.fix_location
        self.last_saccade_time: Optional[float] = None
        self.in_saccade = False
        self.counting_cells = np.zeros(self.count_cells)
        self.saccade_log = SaccadeLog()
        self.messages: List[str] = []
        # Last diagnostics reported, so a persisting condition is reported once
        self._reported_targets: List[int] = []
        self._reported_miss = None

    def report(self, message: str) -> None:
        """Record a diagnostic message, printing it when verbose."""
        self.messages.append(message)
        if self.verbose:
            tqdm.write(message)

    # --- Discrete updates ---

    def update_counting_cells(self, t: float) -> None:
        """Open the rank slot of a non-fixation cue whose onset sample is ``t``."""
        k = t / self.step
        nearest = int(round(k))
        if abs(k - nearest) > GRID_TOLERANCE:
            return
        rank = self.rank_onsets.get(nearest)
        if rank is not None:
            self.counting_cells = np.zeros(self.count_cells)
            self.counting_cells[rank] = 1.0

    def update_saccade(self, t: float, C: np.ndarray, head_input: np.ndarray) -> None:
        """
        Commit a saccade when the colliculus crosses threshold.

        Args:
            t: Current time (internal units)
            C: Rectified colliculus activity (retinotopic)
            head_input: Visual input sample before remapping (craniotopic)
        """
        c_max = np.max(C)
        if c_max > SACCADE_THRESHOLD and t != self.last_saccade_time and not self.in_saccade:
            candidates = np.flatnonzero(C > SACCADE_THRESHOLD) + 1
            if len(candidates) > 1 and candidates.tolist() != self._reported_targets:
                # Known limitation: the first location in index order is used
                self._reported_targets = candidates.tolist()
                self.report(f"multiple saccade targets at t={t / self.time_scale:.4f}s: {self._reported_targets}")

            new_position = self.remap.head_location(self.eye_position, candidates[0])
            if new_position is None:
                miss = (int(candidates[0]), self.eye_position)
                if miss != self._reported_miss:
                    self._reported_miss = miss
                    self.report(f"saccade target {miss[0]} remapped outside the field (eye at {miss[1]})")
                return
            if new_position == self.eye_position:
                return

            outcome = self._classify(new_position, head_input)
            self.last_saccade_time = t
            self.in_saccade = True
            self.eye_position = new_position
            self.saccade_log.append(t, new_position, outcome)

            self.report(f"Saccade initiated to {new_position} at t={t / self.time_scale:.4f} seconds.")
            if outcome:
                self.report(outcome)
        elif c_max < SACCADE_THRESHOLD:
            self.in_saccade = False

    def _classify(self, new_position: int, head_input: np.ndarray) -> str:
        """Diagnostic label for a saccade given whether the fixation point is lit."""
        fixation_lit = head_input[self.fix_location - 1] == 1
        at_fixation = new_position == self.fix_location
        if fixation_lit:
            return "fixation acquired" if at_fixation else "fixation broken"
        if at_fixation:
            return "still fixating"
        return ""

    # --- Dynamics ---

    def derivative(self, t: float, y: np.ndarray) -> np.ndarray:
        """
        Rate of change of the full state vector at time ``t``.

        Updates the counting cells and the saccade controller as a side effect
        before evaluating the region equations.
        """
        self.update_counting_cells(t)

        k = min(sample_index(t, self.step), self.n_samples - 1)
        head_input = self.input_signal[k]
        sigma = self.stimulation[:, k]

        # Each population's own update reads its raw value ``x``; every other
        # population reads the clamped value in ``s``.
        x = self.layout.unpack(y)
        s = {name: values if name in UNRECTIFIED else rectify(values)
             for name, values in x.items()}

        self.update_saccade(t, s['C'], head_input)

        I = self.remap.retina_from_head(self.eye_position, head_input)

        d = {}
        self._parietal(x, s, I, d)
        self._prefrontal(x, s, d)
        self._sef(x, s, sigma, d)
        self._fef(x, s, d)
        self._basal_ganglia(s, d)
        self._thalamus_and_colliculus(x, s, d)

        return self.layout.pack(d)

    def _parietal(self, x, s, I, d):
        PX, PI, PY, PL = x['PX'], x['PI'], x['PY'], x['PL']

        d['PX'] = 10 * (-PX + (1 - PX) * I)
        d['PI'] = 10 * (-PI + (1 - PI) * f1(s['PX']))
        d['PY'] = 10 * (-0.2 * PY + (1 - PY) * (20 * f1(s['PX'])) - 300 * PY * s['PI'] ** 2)
        d['PL'] = 10 * (-PL + (1 - PL) * (4 * f2(s['PY']) + f3(PL) + 2 * s['FO'])
                        - PL * (1 + 100 * sum_over_others(s['PL'] ** 4) + 0.3 * sum_over_others(s['FO'])))

    def _prefrontal(self, x, s, d):
        M, MQ = x['M'], x['MQ']

        noise = self.rng.standard_normal(M.shape)

        # Head-centred parietal output, routed to the open rank only
        head_py = self.remap.head_from_retina(self.eye_position, self.no_fp * s['PY'])
        candidate = np.outer(self.counting_cells, head_py * self.no_fp).ravel()

        loading = 2 * f5(candidate) if self.use_wm else 0.0
        d['M'] = (-0.1 * M + (1 - M) * (0.7 * f4(M) * (1 + noise) + loading)
                  - M * (0.4 * sum_over_others(s['MQ']) + 1000 * f(s['SY'])))
        d['MQ'] = -0.1 * MQ + (1 - MQ) * (0.2 * s['M'])

    def _sef(self, x, s, sigma, d):
        SX, SI, SY, SO = x['SX'], x['SI'], x['SY'], x['SO']
        ZD, ZA = s['ZD'], s['ZA']
        R = s['R'][0]

        d['SX'] = -2 * SX + (1 - SX) * (0.9 * f4(s['M']) * R + 10 * f6(s['SY']) * ZA + sigma) - SX * f2(s['SI'])
        d['SI'] = 10 * (-2 * SI + (1 - SI) * (2 * sum_over_others(f7(s['SX'])) + sigma))
        d['SY'] = 10 * (-2 * SY + (1 - SY) * (25 * f6(s['SX']) * ZD + sigma) - 15 * SY * f2(s['SI']))
        d['ZD'] = 0.1 * (1 - ZD) - ZD * (f6(s['SX']) + 20 * f6(s['SX']) ** 2)
        d['ZA'] = 0.01 * (1 - ZA) - ZA * (f6(s['SY']) + 25 * f6(s['SY']) ** 2)

        # Selection summed over ranks, gated by the head-centred FEF plan
        selected = f8(s['SY']).reshape(self.count_cells, self.n_cells).sum(axis=0)
        plan = self.remap.head_from_retina(self.eye_position, f3(s['FP']))
        d['SO'] = 10 * (-SO + (1 - SO) * (10 * selected + sigma[:self.n_cells]) * (1 + 1.5 * plan)
                        - 0.6 * SO * sum_over_others(plan))

    def _fef(self, x, s, d):
        FP, FI, FO, FX = x['FP'], x['FI'], x['FO'], x['FX']
        PL = s['PL']

        sef = self.remap.retina_from_head(self.eye_position, g(s['SO']))
        d['FP'] = 10 * (-2 * FP + (1 - FP) * (20 * sef + PL)
                        - FP * (sum_over_others(sef) + 5 * s['FX'] + 2 * s['FI']))
        d['FI'] = 10 * (-0.1 * FI + (1 - FI) * (sum_over_others(f2(s['FP'])) + 0.8 * sum_over_others(PL)))
        d['FO'] = 10 * (-FO + (1 - FO) * (3 * s['FP'] * s['T']) - 6 * FO * s['FX'])
        d['FX'] = -2 * FX + (1 - FX) * (100 * (s['C'] > SACCADE_THRESHOLD))

    def _basal_ganglia(self, s, d):
        PL, FP, FO = s['PL'], s['FP'], s['FO']
        lip = rectify(PL - LIP_BG_THRESHOLD)
        at_fixation = lip[self.fix_location - 1]

        # Working memory rehearsal loop
        MD, MI, MG, MN = s['MD'], s['MI'], s['MG'], s['MN']
        d['MD'] = 50 * (1 - MD) - (MD + BG_REST)
        d['MI'] = (1 - MI) * (5 * np.sum(self.no_fp * at_fixation)) - (MI + BG_REST)
        d['MG'] = 0.5 * (1 - MG) - (MG + 1) * (0.2 + 0.8 * rectify(MI))
        d['MN'] = 100 * (1 - MN) - (MN + 1) * (54 * rectify(MD) + 80 * rectify(MG))

        # FEF output loop
        BD, BI, BG, BN = s['BD'], s['BI'], s['BG'], s['BN']
        d['BD'] = (1 - BD) * (3 * PL + 20 * FP) - (BD + BG_REST) * (1 + 9 * np.sum(FP))
        d['BI'] = -(BI + BG_REST)
        d['BG'] = 0.5 * (1 - BG) - (BG + 1) * (0.2 + 0.8 * rectify(BI))
        d['BN'] = 100 * (1 - BN) - (BN + 1) * (54 * rectify(BD) + 80 * rectify(BG))

        # Colliculus loop
        GD, GI, GG, GN = s['GD'], s['GI'], s['GG'], s['GN']
        fo = f10(FO)
        excitatory = 50 * lip + 100 * fo
        inhibitory = 1 + 20 * (np.sum(lip) + np.sum(fo))
        d['GD'] = (1 - GD) * excitatory - (GD + BG_REST) * inhibitory
        d['GI'] = (1 - GI) * (5 * self.no_fp * at_fixation) - (GI + BG_REST)
        d['GG'] = 0.5 * (1 - GG) - (GG + 1) * (0.2 + 0.8 * rectify(GI))
        d['GN'] = 100 * (1 - GN) - (GN + 1) * (54 * rectify(GD) + 80 * rectify(GG))

    def _thalamus_and_colliculus(self, x, s, d):
        R, T, C = x['R'], x['T'], x['C']
        MN, BN, GN = s['MN'], s['BN'], s['GN']
        PL, FO = s['PL'], s['FO']

        d['R'] = 20 * (-0.1 * R + (1 - R) * (20 * (MN < NIGRAL_GATE_THRESHOLD)))
        d['T'] = 15 * (-0.1 * T + (1 - T) * (10 * (BN < NIGRAL_GATE_THRESHOLD)))
        d['C'] = (1 - C) * (50 * f7(PL) + 40 * f7(FO)) - C * (800 * rectify(GN - NIGRAL_GATE_THRESHOLD) + 10)
