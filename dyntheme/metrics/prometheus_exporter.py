"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge


palette_extraction_total = Counter(
    "palette_extraction_total",
    "Palette extraction attempts by outcome.",
    ["outcome"],
)

palette_extractions_in_flight = Gauge(
    "palette_extractions_in_flight",
    "Number of palette extractions currently awaiting image data.",
)

theme_palette_published_total = Counter(
    "theme_palette_published_total",
    "Palettes published by theme controllers.",
    ["source"],
)
