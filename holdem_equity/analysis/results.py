"""
Conversion of raw equity counters into per-player percentages.

finalize() is the only place percentages are computed. Sharded runs merge
their raw SimStats first and finalize once, so no per-shard rounding leaks
into the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from holdem_equity.solvers.equity import SimStats


@dataclass(frozen=True)
class PlayerResult:
    """Exact outcome percentages for one player.

    Attributes:
        win_pct:    Boards won outright, in percent.
        tie_pct:    Boards split with at least one other player, in percent.
        loss_pct:   Boards lost, in percent.
        equity_pct: Expected pot share in percent: wins plus 1/k of every
                    k-way split.
    """

    win_pct: float
    tie_pct: float
    loss_pct: float
    equity_pct: float

    def __str__(self) -> str:
        return (
            f"Win {self.win_pct:.2f}% | Tie {self.tie_pct:.2f}% | "
            f"Loss {self.loss_pct:.2f}% | Equity {self.equity_pct:.2f}%"
        )


def finalize(stats: SimStats) -> list[PlayerResult]:
    """Return one PlayerResult per player from accumulated counters.

    When no board was enumerated every percentage is 0.0.

    Examples:
        >>> from holdem_equity.solvers.equity import SimStats
        >>> finalize(SimStats.empty(2))[0]
        PlayerResult(win_pct=0.0, tie_pct=0.0, loss_pct=0.0, equity_pct=0.0)
    """
    total = stats.total_boards
    if total == 0:
        return [PlayerResult(0.0, 0.0, 0.0, 0.0) for _ in range(stats.num_players)]

    return [
        PlayerResult(
            win_pct=100.0 * float(stats.wins[p]) / total,
            tie_pct=100.0 * float(stats.ties[p]) / total,
            loss_pct=100.0 * float(stats.losses[p]) / total,
            equity_pct=100.0 * float(stats.equity[p]) / total,
        )
        for p in range(stats.num_players)
    ]
