# expense_tracker/outputs/html_chart.py

"""Inline SVG bar chart for the expense screen.

The SVG is self-contained so the template can drop it in as-is; bar heights
are scaled against the largest category total.
"""

from html import escape

from expense_tracker.outputs.base import BaseChart

PALETTE = ["#5e7eeb", "#fbbe24", "#4CAF50", "#f87171", "#9ca3af", "#a78bfa"]


class HTMLChart(BaseChart):
    """Render category totals as a vertical SVG bar chart."""

    def __init__(self, config):
        self.height = int(config.get('chart_height', 220))
        self.bar_width = int(config.get('chart_bar_width', 48))
        self.gap = 16
        self.symbol = config.get('currency_symbol', '')

    def render(self, labels, values):
        if not labels:
            return "<p class='chart-empty'>No expenses to chart.</p>"

        peak = max(values) or 1.0
        label_space = 40
        plot_height = self.height - label_space
        width = len(labels) * (self.bar_width + self.gap) + self.gap

        parts = [
            f"<svg class='chart' role='img' width='{width}' height='{self.height}' "
            f"viewBox='0 0 {width} {self.height}' xmlns='http://www.w3.org/2000/svg'>"
        ]
        for idx, (label, value) in enumerate(zip(labels, values)):
            bar_height = max(plot_height * value / peak, 0) if peak > 0 else 0
            x = self.gap + idx * (self.bar_width + self.gap)
            y = plot_height - bar_height
            color = PALETTE[idx % len(PALETTE)]
            text = escape(str(label))
            amount = f"{self.symbol}{value:.2f}"
            parts.append(
                f"<rect x='{x}' y='{y:.1f}' width='{self.bar_width}' "
                f"height='{bar_height:.1f}' fill='{color}'>"
                f"<title>{text}: {escape(amount)}</title></rect>"
            )
            center = x + self.bar_width / 2
            parts.append(
                f"<text x='{center:.1f}' y='{plot_height + 16}' "
                f"text-anchor='middle' font-size='11'>{text}</text>"
            )
            parts.append(
                f"<text x='{center:.1f}' y='{plot_height + 32}' "
                f"text-anchor='middle' font-size='10' fill='#6b7280'>{escape(amount)}</text>"
            )
        parts.append("</svg>")
        return "".join(parts)
