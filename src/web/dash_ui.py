from __future__ import annotations

from pathlib import Path

import plotly.graph_objects as go
from dash import Dash, Input, Output, dcc, html

from src.engine.models import FlightCategory

from . import timeline_service
from .models import FilterPayload

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

LAYER_FLIGHT_CATEGORY = "flight_category"
LAYER_TEMPERATURE = "temperature"


def filters_from_controls(
    all_tails: list[str],
    selected_tails: list[str] | None,
    layers: list[str] | None,
    categories: list[str] | None,
    hour_px: float | None,
) -> FilterPayload:
    """Translate the checklist/slider values into the engine's filter state."""
    selected_tails = selected_tails or []
    layers = layers or []
    categories = categories or []
    return FilterPayload(
        visible_tails={t: t in selected_tails for t in all_tails},
        categories={c: c.value in categories for c in FlightCategory},
        show_flight_category=LAYER_FLIGHT_CATEGORY in layers,
        show_temperature=LAYER_TEMPERATURE in layers,
        hour_px=hour_px,
    )


def category_options(counts: dict[FlightCategory, int], colors: dict[FlightCategory, str]) -> list[dict]:
    """Checklist options labelled with the number of matching blocks."""
    return [
        {
            "label": html.Span(
                f"{c.value} ({counts.get(c, 0)})",
                style={"color": colors.get(c, "#333"), "fontWeight": 600},
            ),
            "value": c.value,
        }
        for c in FlightCategory
    ]


def _error_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        showarrow=False,
        font=dict(size=14, color="#888"),
    )
    fig.update_layout(
        height=200,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        plot_bgcolor="white",
    )
    return fig


def build_layout() -> html.Div:
    """Page layout; a missing dataset renders a message instead of the controls."""
    try:
        meta = timeline_service.get_meta()
        counts = timeline_service.get_category_counts().counts
    except FileNotFoundError as exc:
        return html.Div(
            [
                html.H2("Condair Flyers Aircraft Activity"),
                dcc.Graph(
                    id="timeline-graph",
                    figure=_error_figure(str(exc)),
                    config={"displayModeBar": False},
                ),
            ],
            style={"padding": "20px", "fontFamily": "sans-serif"},
        )

    tails = [t.tail for t in meta.tails]
    colors = {c.category: c.color for c in meta.categories}
    return html.Div(
        [
            dcc.Store(id="tails-store", data=tails),
            html.H2("Condair Flyers Aircraft Activity"),
            html.Div(
                [
                    html.Label(
                        [
                            "Zoom (px/hour)",
                            dcc.Slider(
                                id="zoom-slider",
                                min=2,
                                max=8,
                                step=2,
                                value=meta.default_hour_px,
                            ),
                        ]
                    ),
                    dcc.Checklist(
                        id="tail-checklist",
                        options=[
                            {
                                "label": html.Span(
                                    t.tail, style={"color": t.color, "fontWeight": 600}
                                ),
                                "value": t.tail,
                            }
                            for t in meta.tails
                        ],
                        value=tails,
                        inline=True,
                    ),
                    dcc.Checklist(
                        id="layer-checklist",
                        options=[
                            {"label": "Flight Category", "value": LAYER_FLIGHT_CATEGORY},
                            {"label": "Temperature", "value": LAYER_TEMPERATURE},
                        ],
                        value=[LAYER_FLIGHT_CATEGORY, LAYER_TEMPERATURE],
                        inline=True,
                    ),
                    dcc.Checklist(
                        id="category-checklist",
                        options=category_options(counts, colors),
                        value=[c.value for c in FlightCategory],
                        inline=True,
                    ),
                ],
                style={
                    "display": "grid",
                    "gap": "8px",
                    "maxWidth": "860px",
                    "marginBottom": "8px",
                    "padding": "10px 12px",
                    "background": "#f5f8fb",
                    "border": "1px solid #d9dee6",
                    "borderRadius": "12px",
                },
            ),
            dcc.Graph(
                id="timeline-graph",
                config={"displayModeBar": False},
            ),
        ],
        style={"padding": "20px", "fontFamily": "sans-serif"},
    )


def create_dash_app() -> Dash:
    app = Dash(
        __name__,
        title="Aircraft Activity",
        update_title=None,
        suppress_callback_exceptions=True,
        assets_folder=str(_PROJECT_ROOT / "assets"),
    )

    # Function-based layout: datasets are read on each page request
    app.layout = build_layout

    @app.callback(
        Output("timeline-graph", "figure"),
        Input("tails-store", "data"),
        Input("tail-checklist", "value"),
        Input("layer-checklist", "value"),
        Input("category-checklist", "value"),
        Input("zoom-slider", "value"),
    )
    def update_figure(all_tails, selected_tails, layers, categories, hour_px):
        payload = filters_from_controls(all_tails, selected_tails, layers, categories, hour_px)
        try:
            return timeline_service.build_figure(payload)
        except FileNotFoundError as exc:
            return _error_figure(str(exc))

    @app.callback(
        Output("category-checklist", "options"),
        Input("tails-store", "data"),
        Input("tail-checklist", "value"),
    )
    def update_category_counts(all_tails, selected_tails):
        payload = filters_from_controls(
            all_tails, selected_tails, [], [c.value for c in FlightCategory], None
        )
        counts = timeline_service.get_category_counts(payload).counts
        colors = timeline_service.get_engine().config.category_colors
        return category_options(counts, colors)

    return app


if __name__ == "__main__":
    create_dash_app().run(debug=True)
