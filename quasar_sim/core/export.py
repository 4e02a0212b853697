"""Result export utilities: counts JSON and histogram PNG output."""

from __future__ import annotations

import json
from pathlib import Path

from matplotlib.figure import Figure

from quasar_sim.engine.measurement import Counts


class ResultExporter:
    """Writes sampling results to disk."""

    @staticmethod
    def export_counts_json(
        counts: Counts,
        filepath: str | Path,
        metadata: dict | None = None,
    ) -> None:
        """Write counts (sorted by bitstring) plus optional metadata as JSON.

        Args:
            counts: Histogram returned by ``Simulator.sample``.
            filepath: Output file path (should end in .json).
            metadata: Extra top-level keys, e.g. circuit name and seed.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        output = dict(metadata or {})
        output["shots"] = counts.shots
        output["counts"] = dict(counts.as_sorted_items())
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)

    @staticmethod
    def export_histogram_png(
        counts: Counts,
        filepath: str | Path,
        title: str = "Measurement Histogram",
        show_probability: bool = True,
        dpi: int = 120,
    ) -> None:
        """Render counts as a bar chart and save it as a PNG image.

        Args:
            counts: Histogram returned by ``Simulator.sample``.
            filepath: Output file path (should end in .png).
            title: Figure title.
            show_probability: Plot probabilities instead of raw counts.
            dpi: Output resolution.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        figure = Figure(figsize=(6, 3.5), dpi=dpi)
        ax = figure.add_subplot(111)

        if not counts:
            ax.text(
                0.5, 0.5, "No measurement data",
                ha="center", va="center", transform=ax.transAxes,
                fontsize=12, color="gray",
            )
            figure.savefig(filepath, format="png")
            return

        sorted_states = sorted(counts.keys())
        if show_probability:
            values = [counts.probability(s) for s in sorted_states]
            ylabel = "Probability"
        else:
            values = [counts[s] for s in sorted_states]
            ylabel = "Counts"

        num_bars = len(sorted_states)
        bars = ax.bar(range(num_bars), values, color="#4A90D9",
                      edgecolor="none", width=0.7)

        ax.set_xticks(range(num_bars))
        rotation = 45 if num_bars > 8 else 0
        ha = "right" if rotation > 0 else "center"
        fontsize = max(6, min(10, 120 // max(num_bars, 1)))
        ax.set_xticklabels(
            [f"|{s}>" for s in sorted_states],
            rotation=rotation, ha=ha, fontsize=fontsize,
        )
        ax.set_ylabel(ylabel)
        ax.set_xlabel("Classical bits (bit 0 first)")
        ax.set_title(title)

        # Value labels only when they fit
        if num_bars <= 32:
            for bar_obj, val in zip(bars, values):
                height = bar_obj.get_height()
                if height > 0:
                    label = f"{val:.3f}" if show_probability else f"{val}"
                    ax.text(
                        bar_obj.get_x() + bar_obj.get_width() / 2.0,
                        height, label,
                        ha="center", va="bottom", fontsize=7,
                    )

        figure.tight_layout()
        figure.savefig(filepath, format="png")
