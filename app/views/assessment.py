"""
Defect assessment view for the B31G Assessor application.
"""
import math

import pandas as pd
import streamlit as st

from core.data_pipeline import load_profile_csv, profile_from_dataframe, profile_to_dataframe
from core.models import API5L_GRADES, AssessmentLevel, DefectProfile, PipeSpec, SimpleDefect, smys_for_grade
from core.pressure_assessment import assess_defect
from core.units import MM_PER_INCH, PSI_PER_MPA, UnitSystem
from visualization.profile_viz import create_profile_visualization

# Example pipeline: 24" X52 gas line
DEFAULT_PIPE = {"D": 610.0, "t": 12.7, "smys": 359.0, "maop": 8.0}
DEFAULT_GRADE = "X52"
DEFAULT_DEFECT = {"L": 200.0, "d": 5.0}
DEFAULT_PROFILE = DefectProfile.from_pairs([(0, 0), (50, 2.5), (100, 6.2), (150, 4.1), (200, 0)])

DESIGN_FACTOR_PRESETS = {
    "Class 1, Div. 2 (0.72)": 0.72,
    "Class 1, Div. 1 (0.80)": 0.80,
    "Class 2 (0.60)": 0.60,
    "Class 3 (0.50)": 0.50,
    "Class 4 (0.40)": 0.40,
    "Custom": None,
}


def _format_value(value):
    """Display format of a result card: '--' for absent or infinite values."""
    if value is None or not math.isfinite(value):
        return "--"
    return f"{value:.4f}" if 0 < value < 10 else f"{value:.2f}"


def _unit_selector(label, key, options):
    return st.radio(label, options=options, horizontal=True, key=f"{key}_unit")


def _length_input(label, key, default_mm, min_value=0.0):
    """Number input with its own mm / in selector; returns (value, unit)."""
    unit = _unit_selector(f"{label} unit", key, ["mm", "in"])
    default = default_mm if unit == "mm" else default_mm / MM_PER_INCH
    value = st.number_input(
        f"{label} ({unit})",
        min_value=min_value,
        value=float(default),
        format="%.4f",
        key=f"{key}_{unit}",
    )
    return value, unit


def _pressure_input(label, key, default_mpa, min_value=0.0):
    unit = _unit_selector(f"{label} unit", key, ["MPa", "psi"])
    default = default_mpa if unit == "MPa" else default_mpa * PSI_PER_MPA
    value = st.number_input(
        f"{label} ({unit})",
        min_value=min_value,
        value=float(default),
        format="%.3f",
        key=f"{key}_{unit}",
    )
    return value, unit


def render_pipe_inputs():
    """Pipe geometry, material grade, MAOP and design factor. Returns a metric PipeSpec."""
    st.markdown("#### Pipeline Parameters")

    D, D_unit = _length_input("Outside Diameter", "pipe_D", DEFAULT_PIPE["D"])
    t, t_unit = _length_input("Wall Thickness", "pipe_t", DEFAULT_PIPE["t"])

    grades = list(API5L_GRADES) + ["Custom"]
    grade = st.selectbox("API 5L Grade", options=grades, index=grades.index(DEFAULT_GRADE), key="pipe_grade")
    if grade != "Custom":
        smys, smys_unit = smys_for_grade(grade), "MPa"
        st.caption(f"SMYS: {smys:.0f} MPa ({smys_for_grade(grade, UnitSystem.IMPERIAL):.0f} psi)")
    else:
        smys, smys_unit = _pressure_input("Custom SMYS", "pipe_smys", DEFAULT_PIPE["smys"])

    maop, maop_unit = _pressure_input("MAOP", "pipe_maop", DEFAULT_PIPE["maop"])

    preset = st.selectbox("Design Factor (F)", options=list(DESIGN_FACTOR_PRESETS), key="pipe_f_preset")
    f = DESIGN_FACTOR_PRESETS[preset]
    if f is None:
        f = st.number_input("Custom Design Factor", min_value=0.01, max_value=1.0,
                            value=0.72, step=0.01, format="%.2f", key="pipe_f_custom")

    return PipeSpec.from_units(
        D, t, smys, maop, f,
        diameter_unit=D_unit, thickness_unit=t_unit, smys_unit=smys_unit, maop_unit=maop_unit,
    )


def render_simple_defect_inputs():
    st.markdown("#### Defect Dimensions")
    L, L_unit = _length_input("Max Axial Length (L)", "defect_L", DEFAULT_DEFECT["L"])
    d, d_unit = _length_input("Max Depth (d)", "defect_d", DEFAULT_DEFECT["d"])
    return SimpleDefect.from_units(L, d, length_unit=L_unit, depth_unit=d_unit)


def render_profile_inputs():
    """
    River-bottom profile editor with optional CSV upload. Returns a DefectProfile,
    or None when the table cannot be read.
    """
    st.markdown("#### River-Bottom Profile")
    x_unit = _unit_selector("Distance unit", "profile_x", ["mm", "in"])
    d_unit = _unit_selector("Depth unit", "profile_d", ["mm", "in"])
    x_system = UnitSystem.METRIC if x_unit == "mm" else UnitSystem.IMPERIAL
    d_system = UnitSystem.METRIC if d_unit == "mm" else UnitSystem.IMPERIAL

    uploaded = st.file_uploader("Load profile from CSV (distance, depth)", type=["csv"], key="profile_csv")
    if uploaded is not None:
        try:
            source_profile = load_profile_csv(uploaded, length_unit=x_unit, depth_unit=d_unit)
        except (ValueError, pd.errors.ParserError) as e:
            st.error(f"Could not read profile CSV: {str(e)}")
            source_profile = DEFAULT_PROFILE
    else:
        source_profile = DEFAULT_PROFILE

    edited = st.data_editor(
        profile_to_dataframe(source_profile, x_system, d_system),
        num_rows="dynamic",
        use_container_width=True,
        key=f"profile_editor_{x_unit}_{d_unit}_{getattr(uploaded, 'name', 'default')}",
    )

    try:
        return profile_from_dataframe(edited, length_unit=x_unit, depth_unit=d_unit)
    except ValueError as e:
        st.error(str(e))
        return None


def render_result(result, verdict, profile=None):
    """Result cards, verdict banner, verbatim calculation steps and the profile plot."""
    if result is None:
        st.warning("No result: complete all required inputs (a profile needs at least two points).")
        return

    u_press = result.unit_system.pressure_unit
    u_len = result.unit_system.length_unit

    severity_renderers = {"safe": st.success, "warning": st.warning, "danger": st.error}
    severity_renderers[verdict.severity](f"**{verdict.headline}**  \n{verdict.explanation}")

    metrics = [
        (f"Failure Pressure ({u_press})", result.failure_pressure),
        (f"Safe Pressure ({u_press})", result.safe_pressure),
        ("ERF", result.erf),
        (f"Flow Stress ({u_press})", result.flow_stress),
    ]
    if result.level is AssessmentLevel.LEVEL_2:
        metrics.append((f"Critical Length ({u_len})", result.critical_length))
    else:
        metrics.append(("z Parameter", result.z_parameter))

    for column, (label, value) in zip(st.columns(len(metrics)), metrics):
        with column:
            st.metric(label, _format_value(value))

    st.markdown("#### Calculation Steps")
    st.code("\n".join(result.steps), language=None)

    if profile is not None:
        st.plotly_chart(create_profile_visualization(profile, result), use_container_width=True)


def render_assessment_view():
    """Inputs on the left, results on the right; the last result is kept in session state."""
    output_label = st.radio("Output units", options=["Metric", "Imperial"], horizontal=True, key="output_units")
    unit_system = UnitSystem.METRIC if output_label == "Metric" else UnitSystem.IMPERIAL

    level = st.radio(
        "Assessment level",
        options=list(AssessmentLevel),
        format_func=lambda lvl: lvl.title,
        horizontal=True,
        key="assessment_level",
    )

    input_col, result_col = st.columns([1, 2])
    with input_col:
        pipe = render_pipe_inputs()
        if level is AssessmentLevel.LEVEL_2:
            defect = render_profile_inputs()
        else:
            defect = render_simple_defect_inputs()
        calculate = st.button("Calculate", key="calculate_assessment", use_container_width=True)

    # frozen inputs are hashable, so the signature detects stale results
    signature = (level, unit_system, pipe, defect)
    stored = st.session_state.get("assessment")
    if stored is not None and stored["signature"][0] is not level:
        stored = None

    if calculate:
        if defect is None:
            result, verdict = None, None
        else:
            result, verdict = assess_defect(level, pipe, defect, unit_system)
        stored = {"signature": signature, "result": result, "verdict": verdict}
        st.session_state.assessment = stored

    with result_col:
        st.markdown(f"### {level.title}")
        if stored is None:
            st.info("Enter the pipeline and defect data, then press **Calculate**.")
            return
        if stored["signature"] != signature:
            st.info("Inputs have changed since the last calculation. Press **Calculate** to refresh.")
        profile = stored["signature"][3] if level is AssessmentLevel.LEVEL_2 else None
        render_result(stored["result"], stored["verdict"], profile)
