from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    hard_drop_per_row: int = 2

    def score_for(self, lines: int) -> int:
        return self.line_clear_scores[min(max(lines, 0), len(self.line_clear_scores) - 1)]

    def hard_drop_bonus(self, rows: int) -> int:
        return self.hard_drop_per_row * rows


DEFAULT_RULES = ScoringRules()


def score_for(lines: int) -> int:
    return DEFAULT_RULES.score_for(lines)
