from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 10

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return self.points_per_line * lines
