# expense_tracker/outputs/text_chart.py

from expense_tracker.outputs.base import BaseChart


class TextChart(BaseChart):
    """Horizontal bar chart drawn with block characters for the terminal."""

    BAR_CHAR = "█"

    def __init__(self, config):
        self.width = int(config.get('chart_width', 40))
        self.symbol = config.get('currency_symbol', '')

    def render(self, labels, values):
        if not labels:
            return "No expenses to chart."

        peak = max(values) if values else 0
        label_width = max(len(str(label)) for label in labels)
        lines = []
        for label, value in zip(labels, values):
            size = int(round(self.width * value / peak)) if peak > 0 else 0
            bar = self.BAR_CHAR * size
            lines.append(
                f"{str(label):<{label_width}} | {bar} {self.symbol}{value:.2f}"
            )
        return "\n".join(lines)
