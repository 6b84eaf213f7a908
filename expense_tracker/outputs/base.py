# expense_tracker/outputs/base.py
from abc import ABC, abstractmethod

class BaseChart(ABC):
    @abstractmethod
    def render(self, labels, values):
        """Render a bar chart of *values* keyed by *labels*."""
        pass
