from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots


# ============================================================
# Configuration / constants
# ============================================================

# (report key, subplot title)
DEFAULT_PANELS: List[Tuple[str, str]] = [
    ("unemployment_rate", "Unemployment rate (%)"),
    ("labor_force_participation_rate", "Labor force participation rate (%)"),
    ("min_wage_pct", "Hourly private workers at/below minimum wage (%)"),
    ("median_hourly_wage", "Median hourly wage ($)"),
    ("parttime_employment_rate", "Part-time employment rate (%)"),
    ("median_overtime_hours", "Median overtime hours (full-time)"),
]

DEFAULT_LINE_COLOR: str = "#1f77b4"

SECTION_KINDS: Dict[str, str] = {"industries": "industry", "occupations": "occupation"}

HOVER_TEMPLATE_MONTHLY = "Month: %{x|%Y-%m}<br>Value: %{y:.2f}<extra></extra>"


# ============================================================
# Helper functions
# ============================================================


def monthly_frame(report: Mapping[str, object]) -> pd.DataFrame:
    """
    Flatten the scalar monthly metrics of a report into a DataFrame indexed by month.
    """
    records = report.get("monthly") or []
    rows = [
        {k: v for k, v in rec.items() if not isinstance(v, list)}  # type: ignore[union-attr]
        for rec in records
    ]
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(
        {"year": df["year"], "month": df["month"], "day": 1}
    )
    return df.sort_values("date").set_index("date")


# ============================================================
# Main plotting functions
# ============================================================


def create_monthly_figure(
    report: Mapping[str, object],
    *,
    panels: Sequence[Tuple[str, str]] = DEFAULT_PANELS,
    line_color: str = DEFAULT_LINE_COLOR,
) -> go.Figure:
    """
    One subplot per headline indicator, months on the x-axis.

    Panels whose metric is absent from the report (or entirely null) are
    skipped; an empty report yields an empty figure.
    """
    df = monthly_frame(report)
    if df.empty:
        return go.Figure()

    available = [
        (key, title) for key, title in panels if key in df.columns and df[key].notna().any()
    ]
    if not available:
        return go.Figure()

    fig = make_subplots(
        rows=len(available),
        cols=1,
        shared_xaxes=True,
        subplot_titles=[f"<b>{title}</b>" for _, title in available],
        vertical_spacing=0.04,
    )

    for i, (key, title) in enumerate(available, start=1):
        fig.add_trace(
            go.Scatter(
                x=df.index,
                y=df[key],
                mode="lines+markers",
                line=dict(width=3, color=line_color),
                marker=dict(size=8, color=line_color),
                name=title,
                showlegend=False,
                hovertemplate=HOVER_TEMPLATE_MONTHLY,
            ),
            row=i,
            col=1,
        )

    fig.update_xaxes(dtick="M1", tickformat="%Y-%m")
    fig.update_layout(
        height=260 * len(available),
        template="plotly_white",
        title_text=f"CPS labor indicators ({report.get('lookback_months')} months)",
        margin=dict(t=90, b=40),
    )
    return fig


def create_wage_distribution_figure(
    report: Mapping[str, object], section: str = "industries"
) -> go.Figure:
    """
    Box-style chart of the long-window wage distribution per group.

    Boxes span q1-q3 with the median line at q2; whiskers run from p10 to
    p90 (not min/max, which are dominated by outliers).
    """
    entries: List[Dict[str, object]] = list(report.get(section) or [])  # type: ignore[arg-type]
    kind = SECTION_KINDS[section]
    name_key = f"{kind}_name"
    entries = [e for e in entries if e.get("q2") is not None]
    if not entries:
        return go.Figure()

    entries.sort(key=lambda e: e["q2"])  # type: ignore[arg-type, return-value]
    names = [str(e[name_key]) for e in entries]

    fig = go.Figure(
        go.Box(
            y=names,
            q1=[e["q1"] for e in entries],
            median=[e["q2"] for e in entries],
            q3=[e["q3"] for e in entries],
            lowerfence=[e["p10"] for e in entries],
            upperfence=[e["p90"] for e in entries],
            orientation="h",
            marker_color=DEFAULT_LINE_COLOR,
            name="Hourly wage",
        )
    )
    fig.update_layout(
        template="plotly_white",
        title_text=f"Hourly wage distribution by {kind} (p10 / q1 / median / q3 / p90)",
        xaxis_title="Dollars per hour",
        height=max(400, 40 * len(entries)),
        showlegend=False,
    )
    return fig
