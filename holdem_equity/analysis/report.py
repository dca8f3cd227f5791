"""Plain-text equity report.

    format_equity_table(results, labels)  — aligned table as a string
    print_equity_report(results, ...)     — banner + table on stdout
"""

from __future__ import annotations

from collections.abc import Sequence

from holdem_equity.analysis.results import PlayerResult


def format_equity_table(
    results: Sequence[PlayerResult],
    labels: Sequence[str] | None = None,
) -> str:
    """Return one aligned row per player.

    Args:
        results: PlayerResult per player.
        labels:  Row labels (e.g. hole cards); defaults to P1, P2, ...

    Raises:
        ValueError: If labels and results differ in length.
    """
    if labels is None:
        labels = [f"P{i + 1}" for i in range(len(results))]
    if len(labels) != len(results):
        raise ValueError(f"Got {len(labels)} labels for {len(results)} players.")

    width = max([len("Player")] + [len(label) for label in labels])
    lines = [
        f"  {'Player':<{width}}  {'Win %':>7}  {'Tie %':>7}  {'Loss %':>7}  {'Equity %':>8}",
        f"  {'-' * width}  {'-' * 7}  {'-' * 7}  {'-' * 7}  {'-' * 8}",
    ]
    for label, r in zip(labels, results):
        lines.append(
            f"  {label:<{width}}  {r.win_pct:>7.2f}  {r.tie_pct:>7.2f}  "
            f"{r.loss_pct:>7.2f}  {r.equity_pct:>8.2f}"
        )
    return "\n".join(lines)


def print_equity_report(
    results: Sequence[PlayerResult],
    labels: Sequence[str] | None = None,
    board: str = "",
) -> None:
    """Print an equity table with a header naming the board."""
    print("=" * 56)
    print(f"Exact Equity  (board: {board or 'none'})")
    print("=" * 56)
    print(format_equity_table(results, labels))
    print()
