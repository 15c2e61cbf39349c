"""
Core Fitness-for-Service (FFS) calculation functions.

This module contains the ASME B31G remaining-strength evaluators:

- Level 0: Original B31G (parabolic / rectangular metal-loss area)
- Level 1: Modified B31G (0.85dL area, Folias bulging factor)
- Level 2: RSTRENG effective area over a river-bottom profile

Every evaluator takes metric inputs, converts them once into the requested
output unit system and does all of its arithmetic there, so the step trace reads
in the units the user sees. Missing or invalid inputs give None ("no result").
"""
import logging
import math
import numbers
from typing import Optional, Tuple

import numpy as np

from core.models import AssessmentLevel, AssessmentResult, DefectProfile, PipeSpec, SimpleDefect
from core.step_trace import StepTrace
from core.units import UnitSystem, length_from_metric, pressure_from_metric

logger = logging.getLogger(__name__)

# Folias factor breakpoints
ORIGINAL_B31G_Z_LIMIT = 20.0
MODIFIED_B31G_Z_LIMIT = 50.0


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, numbers.Real) and math.isnan(value))


def _pipe_in_system(pipe: PipeSpec, system: UnitSystem) -> Optional[Tuple[float, float, float, float, float]]:
    """
    Validate the pipe data and convert it to `system`.

    Returns (D, t, SMYS, MAOP, F) or None when a value is absent or breaks
    D > 0, t > 0, SMYS > 0, MAOP >= 0, 0 < F <= 1.
    """
    values = (pipe.outer_diameter, pipe.wall_thickness, pipe.smys, pipe.maop, pipe.design_factor)
    if any(_is_missing(v) for v in values):
        logger.debug(f"No result: missing pipe data {pipe}")
        return None

    D, t, smys, maop, f = (float(v) for v in values)
    if D <= 0 or t <= 0 or smys <= 0 or maop < 0 or not (0.0 < f <= 1.0):
        logger.debug(f"No result: pipe data outside valid range {pipe}")
        return None

    return (
        length_from_metric(D, system),
        length_from_metric(t, system),
        pressure_from_metric(smys, system),
        pressure_from_metric(maop, system),
        f,
    )


def _defect_in_system(defect: SimpleDefect, system: UnitSystem) -> Optional[Tuple[float, float]]:
    if defect is None or _is_missing(defect.length) or _is_missing(defect.depth):
        logger.debug(f"No result: missing defect data {defect}")
        return None
    if defect.length <= 0 or defect.depth < 0:
        logger.debug(f"No result: defect dimensions outside valid range {defect}")
        return None
    return length_from_metric(float(defect.length), system), length_from_metric(float(defect.depth), system)


def modified_folias_factor(z: float) -> float:
    """
    Folias bulging factor shared by Modified B31G and RSTRENG.

    The two branches do not meet at z = 50; the jump is part of the method.
    """
    if z <= MODIFIED_B31G_Z_LIMIT:
        return math.sqrt(1.0 + 0.6275 * z - 0.003375 * z ** 2)
    return 0.032 * z + 3.3


def estimated_repair_factor(maop: float, safe_pressure: float) -> float:
    """ERF = MAOP / Psafe; a non-positive safe pressure gives +inf."""
    return maop / safe_pressure if safe_pressure > 0 else float("inf")


def _finish(trace: StepTrace, failure_pressure: float, f: float, maop: float, u_press: str):
    p_safe = failure_pressure * f
    trace.add(f"Safe Pressure (Psafe) = Pf × F = {failure_pressure:.2f} × {f} = {p_safe:.2f} {u_press}")

    erf = estimated_repair_factor(maop, p_safe)
    trace.add(f"Estimated Repair Factor (ERF) = MAOP / Psafe = {maop:.2f} / {p_safe:.2f} = {erf:.4f}")
    return p_safe, erf


def evaluate_level0(pipe: PipeSpec, defect: SimpleDefect,
                    unit_system: UnitSystem = UnitSystem.METRIC) -> Optional[AssessmentResult]:
    """
    Original ASME B31G assessment of a single length/depth defect.

    z <= 20 uses the parabolic area (2/3 dL) with M = sqrt(1 + 0.8 z);
    z > 20 uses the rectangular area, the M -> infinity limit of the same formula.

    Parameters:
    - pipe: PipeSpec in mm / MPa
    - defect: SimpleDefect in mm
    - unit_system: unit system of the returned values and trace

    Returns:
    - AssessmentResult, or None if any required input is missing or invalid
    """
    pipe_values = _pipe_in_system(pipe, unit_system)
    defect_values = _defect_in_system(defect, unit_system)
    if pipe_values is None or defect_values is None:
        return None
    D, t, smys, maop, f = pipe_values
    L, d = defect_values
    u_press = unit_system.pressure_unit
    trace = StepTrace()

    # ── 1  flow stress ─────────────────────────────────────────
    s_flow = 1.1 * smys
    trace.add(f"Flow Stress (S_flow) = 1.1 × SMYS = 1.1 × {smys:.2f} = {s_flow:.2f} {u_press}")

    # ── 2  z-parameter ─────────────────────────────────────────
    z = (L ** 2) / (D * t)
    trace.add(f"Parameter (z) = L² / (D × t) = {L:.2f}² / ({D:.2f} × {t:.2f}) = {z:.4f}")

    # ── 3  failure pressure ────────────────────────────────────
    hoop = 2.0 * t * s_flow / D
    if z <= ORIGINAL_B31G_Z_LIMIT:
        M = math.sqrt(1.0 + 0.8 * z)
        a_ratio = (2.0 / 3.0) * (d / t)
        denom = 1.0 - a_ratio / M
        Pf = hoop * (1.0 - a_ratio) / denom if denom > 0.0 else 0.0
        trace.add(f"Failure Pressure (Pf) [for z ≤ 20] = (2 × t × S_flow / D) × "
                  f"[(1 - 2/3(d/t)) / (1 - 2/3(d/t)/M)] = {Pf:.2f} {u_press}")
        trace.detail(f"Folias Factor (M) = √(1 + 0.8 × z) = {M:.4f}")
        if denom <= 0.0:
            trace.detail("Denominator (1 - 2/3(d/t)/M) ≤ 0: treated as through-wall, Pf = 0")
    else:
        M = float("inf")
        Pf = hoop * (1.0 - d / t)
        trace.add(f"Failure Pressure (Pf) [for z > 20] = (2 × t × S_flow / D) × (1 - d/t) = {Pf:.2f} {u_press}")
        trace.detail("Folias Factor (M) → ∞ (rectangular area)")

    # ── 4/5  safe pressure & ERF ───────────────────────────────
    p_safe, erf = _finish(trace, Pf, f, maop, u_press)

    return AssessmentResult(
        level=AssessmentLevel.LEVEL_0,
        unit_system=unit_system,
        flow_stress=s_flow,
        failure_pressure=Pf,
        safe_pressure=p_safe,
        erf=erf,
        max_depth=d,
        wall_thickness=t,
        steps=trace.steps,
        z_parameter=z,
        folias_factor=M,
        leak=d >= t,
    )


def evaluate_level1(pipe: PipeSpec, defect: SimpleDefect,
                    unit_system: UnitSystem = UnitSystem.METRIC) -> Optional[AssessmentResult]:
    """
    ASME Modified B31G (0.85 dL) assessment of a single length/depth defect.
    Flow stress is SMYS + 10 ksi (68.95 MPa / 10000 psi).
    """
    pipe_values = _pipe_in_system(pipe, unit_system)
    defect_values = _defect_in_system(defect, unit_system)
    if pipe_values is None or defect_values is None:
        return None
    D, t, smys, maop, f = pipe_values
    L, d = defect_values
    u_press = unit_system.pressure_unit
    trace = StepTrace()

    # 1 ─ flow stress
    margin = unit_system.flow_stress_margin
    s_flow = smys + margin
    trace.add(f"Flow Stress (S_flow) = SMYS + {margin:g} = {smys:.2f} + {margin:g} = {s_flow:.2f} {u_press}")

    # 2 ─ dimensionless length & Folias factor
    z = (L ** 2) / (D * t)
    trace.add(f"Parameter (z) = L² / (D × t) = {L:.2f}² / ({D:.2f} × {t:.2f}) = {z:.4f}")
    M = modified_folias_factor(z)
    if z <= MODIFIED_B31G_Z_LIMIT:
        trace.detail(f"Folias Factor (M) = √(1 + 0.6275z - 0.003375z²) = {M:.4f}")
    else:
        trace.detail(f"Folias Factor (M) = 0.032z + 3.3 = {M:.4f}")

    # 3 ─ failure pressure (0.85 dL area)
    a_ratio = 0.85 * (d / t)
    denom = 1.0 - a_ratio / M
    Pf = (2.0 * t * s_flow / D) * (1.0 - a_ratio) / denom if denom > 0.0 else 0.0
    trace.add(f"Failure Pressure (Pf) = (2 × t × S_flow / D) × "
              f"[(1 - 0.85(d/t)) / (1 - 0.85(d/t)/M)] = {Pf:.2f} {u_press}")
    if denom <= 0.0:
        trace.detail("Denominator (1 - 0.85(d/t)/M) ≤ 0: treated as through-wall, Pf = 0")

    # 4/5 ─ safe pressure & ERF
    p_safe, erf = _finish(trace, Pf, f, maop, u_press)

    return AssessmentResult(
        level=AssessmentLevel.LEVEL_1,
        unit_system=unit_system,
        flow_stress=s_flow,
        failure_pressure=Pf,
        safe_pressure=p_safe,
        erf=erf,
        max_depth=d,
        wall_thickness=t,
        steps=trace.steps,
        z_parameter=z,
        folias_factor=M,
        leak=d >= t,
    )


def evaluate_level2(pipe: PipeSpec, profile: DefectProfile,
                    unit_system: UnitSystem = UnitSystem.METRIC) -> Optional[AssessmentResult]:
    """
    RSTRENG effective-area calculation over a river-bottom profile.

    Every sub-interval [x_i, x_j] of the sorted profile is evaluated with its
    trapezoidal metal-loss area and its own Folias factor. The interval with the
    lowest failure pressure is the critical effective area. Any point with depth
    >= t is a leak and forces Pf = 0.

    Parameters:
        pipe: PipeSpec in mm / MPa
        profile: DefectProfile in mm, any order, at least 2 points
        unit_system: unit system of the returned values and trace

    Returns:
        AssessmentResult with the critical interval, or None for missing pipe
        data, fewer than 2 points, negative depths, or a profile without any
        non-zero-length interval. A leaking profile always gives a result; with
        no non-zero-length interval its critical fields are None.
    """
    pipe_values = _pipe_in_system(pipe, unit_system)
    if pipe_values is None:
        return None
    if profile is None or len(profile) < 2:
        logger.debug("No result: profile needs at least 2 points")
        return None
    if any(_is_missing(p.distance) or _is_missing(p.depth) for p in profile):
        logger.debug("No result: profile contains missing values")
        return None
    if any(p.depth < 0 for p in profile):
        logger.debug("No result: profile contains negative depths")
        return None

    D, t, smys, maop, f = pipe_values
    u_press = unit_system.pressure_unit
    u_len = unit_system.length_unit
    trace = StepTrace()

    # ---- Sort and convert the profile
    ordered = profile.sorted()
    x = np.array([length_from_metric(p.distance, unit_system) for p in ordered], dtype=float)
    depths = np.array([length_from_metric(p.depth, unit_system) for p in ordered], dtype=float)
    N = len(x)

    # ---- Flow stress (SMYS + 10 ksi)
    margin = unit_system.flow_stress_margin
    s_flow = smys + margin
    trace.add(f"Flow Stress (S_flow) = SMYS + {margin:g} = {smys:.2f} + {margin:g} = {s_flow:.2f} {u_press}")
    trace.add(f"Evaluated {N} river-bottom points to find the critical effective area.")

    # ---- Prefix sums of trapezoid segments
    # area(i:j) = prefix[j] - prefix[i]
    segments = np.diff(x) * (depths[1:] + depths[:-1]) / 2.0
    prefix = np.concatenate(([0.0], np.cumsum(segments)))
    hoop = 2.0 * t * s_flow / D

    min_pf = float("inf")
    crit_L = crit_A = 0.0
    crit_pair = None
    degenerate = 0
    through_wall = 0

    # ---- Exhaustive search over every interval
    for i in range(N - 1):
        for j in range(i + 1, N):
            L_ij = float(x[j] - x[i])
            if L_ij <= 0.0:
                degenerate += 1
                continue

            A_ij = float(prefix[j] - prefix[i])
            z = (L_ij * L_ij) / (D * t)
            M = modified_folias_factor(z)

            ratio = A_ij / (L_ij * t)
            if ratio < 1.0:
                Pf = hoop * (1.0 - ratio) / (1.0 - ratio / M)
            else:
                # wall fully lost on average over this interval
                Pf = 0.0
                through_wall += 1

            if Pf < min_pf:
                min_pf = Pf
                crit_L = L_ij
                crit_A = A_ij
                crit_pair = (float(x[i]), float(x[j]))

    logger.debug(f"RSTRENG search: {N * (N - 1) // 2} intervals, {degenerate} zero-length, "
                 f"{through_wall} through-wall")

    max_d = float(depths.max())
    leak = max_d >= t

    # a leak still gets a result when no interval has length
    if crit_pair is None and not leak:
        logger.debug("No result: every profile interval has zero length")
        return None

    if through_wall:
        trace.detail(f"{through_wall} interval(s) with area ratio (A / Lt) ≥ 1 treated as through-wall (Pf = 0)")

    # ---- Leak override
    if leak:
        min_pf = 0.0
        logger.warning(f"Leak: max profile depth {max_d:.3f} {u_len} >= wall thickness {t:.3f} {u_len}")
        trace.warn(f"LEAK DETECTED: Max depth ({max_d:.2f}) >= Wall Thickness ({t:.2f})")

    if crit_pair is not None:
        trace.add(f"Minimum Failure Pressure found between X = {crit_pair[0]:.2f} and X = {crit_pair[1]:.2f}")
        trace.detail(f"Critical Length (L_crit) = {crit_L:.2f} {u_len}")
        trace.detail(f"Critical Area (A_crit) = {crit_A:.2f} {u_len}²")
        trace.detail(f"Area Ratio (A / Lt) = {crit_A / (crit_L * t):.4f}")
    else:
        crit_L = crit_A = None
        trace.detail("No interval of non-zero length in profile")
    trace.add(f"Critical Failure Pressure (Pf) = {min_pf:.2f} {u_press}")

    p_safe, erf = _finish(trace, min_pf, f, maop, u_press)

    return AssessmentResult(
        level=AssessmentLevel.LEVEL_2,
        unit_system=unit_system,
        flow_stress=s_flow,
        failure_pressure=min_pf,
        safe_pressure=p_safe,
        erf=erf,
        max_depth=max_d,
        wall_thickness=t,
        steps=trace.steps,
        critical_length=crit_L,
        critical_area=crit_A,
        critical_interval=crit_pair,
        through_wall_intervals=through_wall,
        leak=leak,
    )
