"""Plotly visualisation helpers for Money Lodge.

Each function accepts the objects returned by
:func:`money_lodge.metrics.calculate_month_metrics` and produces a
`plotly.graph_objects.Figure` that Streamlit can render via
``st.plotly_chart``.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .metrics import BudgetCategoryStatus, ChartSlice


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_income_distribution_chart(
    slices: Sequence[ChartSlice], title: str | None = None
) -> go.Figure:
    """Generate the income distribution pie chart.

    Parameters
    ----------
    slices : sequence of ChartSlice
        Positive buckets (Expenses, Bills, Debt Payments, Remaining),
        each with its own fixed colour.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart labelled with bucket name and percentage.
    """
    if not slices:
        return _empty_figure()
    fig = go.Figure(
        go.Pie(
            labels=[s.name for s in slices],
            values=[s.value for s in slices],
            marker=dict(colors=[s.color for s in slices]),
            texttemplate="%{label}: %{percent:.0%}",
            hovertemplate="%{label}: $%{value:,.2f}<extra></extra>",
            sort=False,
        )
    )
    fig.update_layout(title=title or "Income distribution")
    return fig


def create_budget_comparison_chart(
    statuses: Sequence[BudgetCategoryStatus], title: str | None = None
) -> go.Figure:
    """Planned versus actual spending per budget category.

    Categories with nothing planned and nothing spent are left out.
    """
    rows = [s for s in statuses if s.planned or s.actual]
    if not rows:
        return _empty_figure()
    df = pd.DataFrame(
        {
            "Category": [s.category for s in rows],
            "Planned": [s.planned for s in rows],
            "Actual": [s.actual for s in rows],
        }
    )
    long_df = df.melt(id_vars="Category", var_name="Kind", value_name="Amount")
    fig = px.bar(long_df, x="Category", y="Amount", color="Kind", barmode="group")
    fig.update_layout(
        title=title or "Budget: planned vs actual",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig
