"""
PCA Plotting Functions

Visualization functions for composition PCA results.
Includes the biplot with per-condition ellipses, the top-compound
boxplots, the scree plot and the contribution bar chart.
"""

import math

import plotly.graph_objects as go
import pandas as pd
import numpy as np
from plotly.subplots import make_subplots
from typing import Optional, List

from color_utils import create_categorical_color_map, get_unified_color_schemes, hex_to_rgba

from .config import (
    COL_COMPOUND,
    COL_CONCENTRATION,
    COL_CONDITION,
    DEFAULT_ARROW_SCALE,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_ELLIPSE_TYPE,
    DEFAULT_TOP_N,
    MIN_ELLIPSE_POINTS
)
from .data_model import PCAResult
from .pca_statistics import confidence_ellipse, select_top_contributors


def _sample_label(key) -> str:
    if isinstance(key, tuple):
        return ' '.join(str(part) for part in key)
    return str(key)


def plot_scree(
    variance_percent: np.ndarray,
    component_labels: Optional[List[str]] = None
) -> go.Figure:
    """
    Create scree plot showing variance explained by each component.

    Parameters
    ----------
    variance_percent : np.ndarray
        Percentage of variance explained per component (0-100 scale).
    component_labels : List[str], optional
        Custom labels for components. If None, uses PC1, PC2, etc.

    Returns
    -------
    go.Figure
        Plotly Figure object containing the scree plot.

    Examples
    --------
    >>> fig = plot_scree(np.array([45.0, 25.0, 15.0, 10.0, 5.0]))
    """
    variance_percent = np.asarray(variance_percent, dtype=float)
    if component_labels is None:
        component_labels = [f'PC{i+1}' for i in range(len(variance_percent))]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=component_labels,
        y=variance_percent,
        name='Variance Explained',
        marker_color='rgba(100, 149, 237, 0.70)',
        text=[f'{v:.1f}%' for v in variance_percent],
        textposition='outside'
    ))

    fig.add_trace(go.Scatter(
        x=component_labels,
        y=variance_percent,
        mode='lines+markers',
        name='Trend',
        line=dict(color='red', width=2),
        marker=dict(size=8, symbol='circle'),
        showlegend=False
    ))

    fig.update_layout(
        title="Scree Plot - Variance Explained (Principal Components)",
        xaxis_title="Principal Component",
        yaxis_title="Variance Explained (%)",
        height=500,
        template='plotly_white'
    )

    return fig


def add_confidence_ellipses(
    fig: go.Figure,
    ind_coord: pd.DataFrame,
    conditions: pd.Series,
    color_discrete_map: dict,
    pc_x: str = 'PC1',
    pc_y: str = 'PC2',
    level: float = DEFAULT_CONFIDENCE_LEVEL,
    kind: str = DEFAULT_ELLIPSE_TYPE,
    fill_opacity: float = 0.15
) -> go.Figure:
    """
    Add one filled ellipse per condition to a scores or biplot figure.

    Parameters
    ----------
    fig : go.Figure
        Existing Plotly figure.
    ind_coord : pd.DataFrame
        Sample coordinates with PC columns.
    conditions : pd.Series
        Condition label per sample, aligned to ``ind_coord`` rows.
    color_discrete_map : dict
        Condition -> '#RRGGBB' color.
    level : float, optional
        Coverage probability of the ellipse. Default is 0.95.
    kind : str, optional
        'confidence' (group mean) or 'norm' (individual points).

    Returns
    -------
    go.Figure
        The same figure with ellipse traces added.

    Notes
    -----
    Groups with fewer than 3 samples get no ellipse.
    """
    conditions = pd.Series(conditions.to_numpy(), index=ind_coord.index)

    for group in pd.unique(conditions):
        mask = (conditions == group).to_numpy()
        if mask.sum() < MIN_ELLIPSE_POINTS:
            continue

        xs, ys = confidence_ellipse(
            ind_coord.loc[mask, pc_x].to_numpy(),
            ind_coord.loc[mask, pc_y].to_numpy(),
            level=level,
            kind=kind
        )
        color = color_discrete_map.get(group, '#808080')

        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode='lines',
            fill='toself',
            fillcolor=hex_to_rgba(color, fill_opacity),
            line=dict(color=color, width=1),
            name=f'{group} ellipse',
            legendgroup=str(group),
            showlegend=False,
            hoverinfo='skip'
        ))

    return fig


def plot_biplot(
    pca_result: PCAResult,
    conditions: pd.Series,
    ranking: pd.DataFrame,
    top_n: int = DEFAULT_TOP_N,
    arrow_scale: float = DEFAULT_ARROW_SCALE,
    ellipse_level: float = DEFAULT_CONFIDENCE_LEVEL,
    ellipse_type: str = DEFAULT_ELLIPSE_TYPE,
    show_ellipses: bool = True
) -> go.Figure:
    """
    Create PC1 vs PC2 biplot of samples and compound loadings.

    Parameters
    ----------
    pca_result : PCAResult
        Output of compute_pca.
    conditions : pd.Series
        Condition label per sample, aligned to ``pca_result.ind_coord``.
    ranking : pd.DataFrame
        Output of rank_contributors; the first ``top_n`` compounds get
        solid labelled arrows, the rest are drawn faded without labels.
    top_n : int, optional
        Number of emphasized compounds. Default is 10.
    arrow_scale : float, optional
        Display multiplier for arrow length. Default is 5.0.
    ellipse_level : float, optional
        Coverage probability of the condition ellipses. Default is 0.95.
    ellipse_type : str, optional
        'confidence' or 'norm'. Default is 'confidence'.
    show_ellipses : bool, optional
        Draw condition ellipses. Default is True.

    Returns
    -------
    go.Figure
        Plotly Figure object containing the biplot.

    Notes
    -----
    ``arrow_scale`` only stretches the drawn arrows so they are legible
    next to the sample cloud; hover text reports the unscaled
    coordinates and ``pca_result`` is left untouched.

    Examples
    --------
    >>> ranking = rank_contributors(pca_result)
    >>> fig = plot_biplot(pca_result, wide.conditions, ranking, top_n=5)
    """
    ind_coord = pca_result.ind_coord
    var_coord = pca_result.var_coord
    var_x, var_y = pca_result.variance_percent[:2]
    var_total = var_x + var_y

    colors = get_unified_color_schemes()
    conditions = pd.Series(conditions.to_numpy(), index=ind_coord.index)
    color_discrete_map = create_categorical_color_map(pd.unique(conditions))

    fig = go.Figure()

    # Ellipses first so points and arrows draw on top
    if show_ellipses:
        fig = add_confidence_ellipses(
            fig, ind_coord, conditions, color_discrete_map,
            level=ellipse_level, kind=ellipse_type
        )

    for group in pd.unique(conditions):
        mask = (conditions == group).to_numpy()
        group_coord = ind_coord.loc[mask]
        labels = [_sample_label(key) for key in group_coord.index]

        fig.add_trace(go.Scatter(
            x=group_coord['PC1'],
            y=group_coord['PC2'],
            mode='markers',
            name=str(group),
            legendgroup=str(group),
            marker=dict(size=9, color=color_discrete_map[group]),
            text=labels,
            hovertemplate='%{text}<br>PC1: %{x:.3f}<br>PC2: %{y:.3f}<extra></extra>'
        ))

    # Loading vectors: faded ones first, top contributors last
    top_compounds = list(select_top_contributors(ranking, top_n)['compound'])
    ordered = [c for c in ranking['compound'] if c not in top_compounds] + top_compounds

    for compound in ordered:
        emphasized = compound in top_compounds
        x_load = var_coord.loc[compound, 'PC1']
        y_load = var_coord.loc[compound, 'PC2']
        color = colors['arrow'] if emphasized else colors['arrow_faded']

        fig.add_trace(go.Scatter(
            x=[0, x_load * arrow_scale],
            y=[0, y_load * arrow_scale],
            mode='lines+text' if emphasized else 'lines',
            line=dict(color=color, width=1.5 if emphasized else 1),
            text=['', compound] if emphasized else None,
            textposition='top center',
            textfont=dict(size=10, color=color),
            showlegend=False,
            hoverinfo='text',
            hovertext=(
                f'Compound: {compound}<br>PC1: {x_load:.3f}<br>PC2: {y_load:.3f}'
            )
        ))

        fig.add_annotation(
            x=x_load * arrow_scale, y=y_load * arrow_scale,
            ax=0, ay=0,
            xref='x', yref='y',
            axref='x', ayref='y',
            showarrow=True,
            arrowhead=2,
            arrowsize=1,
            arrowwidth=1.5 if emphasized else 1,
            arrowcolor=color,
            opacity=0.9 if emphasized else 0.5
        )

    # Add zero reference lines
    fig.add_hline(y=0, line_dash="dash", line_color="gray", opacity=0.7)
    fig.add_vline(x=0, line_dash="dash", line_color="gray", opacity=0.7)

    fig.update_layout(
        title=dict(
            text=f"PCA Biplot: PC1 vs PC2<br>Total Explained Variance: {var_total:.1f}%",
            x=0.5,
            xanchor='center',
            font=dict(size=14, color='#333')
        ),
        height=650,
        width=900,
        xaxis=dict(
            title=f'PC1 ({var_x:.1f}%)',
            scaleanchor="y",
            scaleratio=1,
            constrain="domain"
        ),
        yaxis=dict(
            title=f'PC2 ({var_y:.1f}%)',
            constrain="domain"
        ),
        margin=dict(l=60, r=60, t=80, b=60),
        legend=dict(
            title='Condition',
            x=0.99,
            y=0.99,
            xanchor='right',
            yanchor='top',
            bgcolor='rgba(255, 255, 255, 0.9)',
            borderwidth=0,
            font=dict(size=10)
        ),
        hovermode='closest',
        template='plotly_white'
    )

    return fig


def plot_top_compound_boxplots(
    observations: pd.DataFrame,
    top_ranking: pd.DataFrame,
    n_cols: int = 3
) -> go.Figure:
    """
    One boxplot panel per ranked compound comparing conditions.

    Parameters
    ----------
    observations : pd.DataFrame
        Validated long-format observations.
    top_ranking : pd.DataFrame
        Ranked compounds to show; panel order follows its row order.
    n_cols : int, optional
        Panels per row. Default is 3.

    Returns
    -------
    go.Figure
        Figure with exactly ``len(top_ranking)`` subplots, titled by
        compound name.
    """
    compounds = list(top_ranking['compound'])
    if not compounds:
        raise ValueError("top_ranking is empty: nothing to plot")
    if n_cols < 1:
        raise ValueError(f"n_cols must be >= 1, got {n_cols}")

    n_cols = min(n_cols, len(compounds))
    n_rows = math.ceil(len(compounds) / n_cols)

    subset = observations[observations[COL_COMPOUND].isin(compounds)]
    condition_order = list(pd.unique(observations[COL_CONDITION]))
    color_discrete_map = create_categorical_color_map(condition_order)

    fig = make_subplots(
        rows=n_rows,
        cols=n_cols,
        subplot_titles=compounds,
        horizontal_spacing=0.08,
        vertical_spacing=0.12 if n_rows > 1 else 0.0
    )

    for i, compound in enumerate(compounds):
        row, col = divmod(i, n_cols)
        compound_data = subset[subset[COL_COMPOUND] == compound]

        for condition in condition_order:
            values = compound_data.loc[
                compound_data[COL_CONDITION] == condition, COL_CONCENTRATION
            ]
            if values.empty:
                continue
            fig.add_trace(
                go.Box(
                    y=values,
                    name=str(condition),
                    legendgroup=str(condition),
                    showlegend=(i == 0),
                    marker_color=color_discrete_map[condition],
                    boxpoints='all',
                    jitter=0.3,
                    pointpos=0
                ),
                row=row + 1,
                col=col + 1
            )

        fig.update_yaxes(title_text='Concentration' if col == 0 else None, row=row + 1, col=col + 1)

    fig.update_layout(
        title=dict(
            text=f"Top {len(compounds)} Contributing Compounds by Condition",
            x=0.5,
            xanchor='center'
        ),
        height=max(400, 320 * n_rows),
        legend=dict(title='Condition'),
        template='plotly_white'
    )

    return fig


def plot_variable_contributions(
    ranking: pd.DataFrame,
    top_n: Optional[int] = None
) -> go.Figure:
    """
    Horizontal bar chart of mean contributions to PC1 and PC2.

    The dashed line marks the contribution every compound would have if
    all contributed equally (100 / number of compounds).
    """
    n_total = len(ranking)
    shown = ranking if top_n is None else select_top_contributors(ranking, top_n)
    # Largest bar on top
    shown = shown.iloc[::-1]

    fig = go.Figure(go.Bar(
        x=shown['mean_contribution'],
        y=shown['compound'],
        orientation='h',
        marker_color='rgba(100, 149, 237, 0.80)',
        hovertemplate='%{y}: %{x:.2f}%<extra></extra>'
    ))

    fig.add_vline(
        x=100.0 / n_total,
        line_dash="dash",
        line_color="red",
        annotation_text="uniform",
        annotation_position="top"
    )

    fig.update_layout(
        title="Mean Contribution to PC1 and PC2",
        xaxis_title="Contribution (%)",
        yaxis_title="Compound",
        height=max(400, 25 * len(shown) + 150),
        template='plotly_white'
    )

    return fig
