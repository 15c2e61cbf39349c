"""
River-bottom profile visualization with the RSTRENG critical interval.
"""
import plotly.graph_objects as go

from analysis.acceptance import MAX_DEPTH_FRACTION
from core.units import UnitSystem, length_from_metric


def create_profile_visualization(profile, result=None, unit_system=UnitSystem.METRIC):
    """
    Plot a defect profile as metal loss below the pipe surface.

    Parameters:
    - profile: DefectProfile in mm
    - result: optional Level 2 AssessmentResult; its critical interval is shaded
    - unit_system: display units, taken from `result` when one is given

    Returns:
    - plotly Figure
    """
    if result is not None:
        unit_system = result.unit_system
    u_len = unit_system.length_unit

    if profile is None or len(profile) == 0:
        fig = go.Figure()
        fig.add_annotation(
            text="No profile points to display",
            xref="paper", yref="paper", x=0.5, y=0.5, showarrow=False,
            font=dict(size=16, color='#2C3E50')
        )
        return fig

    ordered = profile.sorted()
    x = [length_from_metric(p.distance, unit_system) for p in ordered]
    depth = [length_from_metric(p.depth, unit_system) for p in ordered]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=x,
        y=[-d for d in depth],
        mode='lines+markers',
        fill='tozeroy',
        line=dict(color='#E74C3C', width=2),
        marker=dict(size=7),
        name='River-bottom profile',
        text=[f"<b>X:</b> {xi:.2f} {u_len}<br><b>Depth:</b> {di:.2f} {u_len}" for xi, di in zip(x, depth)],
        hovertemplate='%{text}<extra></extra>'
    ))

    if result is not None:
        t = result.wall_thickness
        fig.add_hline(
            y=-t,
            line_dash="solid",
            line_color="black",
            annotation_text=f"Wall thickness: {t:.2f} {u_len}"
        )
        fig.add_hline(
            y=-MAX_DEPTH_FRACTION * t,
            line_dash="dash",
            line_color="orange",
            annotation_text="80% wall thickness"
        )
        if result.critical_interval is not None:
            x0, x1 = result.critical_interval
            fig.add_vrect(
                x0=x0, x1=x1,
                fillcolor="purple", opacity=0.15, line_width=0,
                annotation_text=f"Critical interval (L = {result.critical_length:.2f} {u_len})",
                annotation_position="top left"
            )

    fig.update_layout(
        title="Defect Profile",
        xaxis_title=f"Axial Distance ({u_len})",
        yaxis_title=f"Depth below surface ({u_len})",
        height=400,
        hovermode='closest',
        legend=dict(yanchor="bottom", y=0.01, xanchor="right", x=0.99)
    )

    return fig
