"""
Plain-text rendering of an AnalysisResult for the command line.
"""

from itertools import groupby
from typing import List

from lottolens.date_utils import format_date
from lottolens.engine.analyzer import AnalysisResult


def format_report(result: AnalysisResult, max_dates: int = 10) -> str:
    lines: List[str] = []
    summary = result.summary

    if not result.matches:
        lines.append(f"No occurrences of {result.padded_query} found "
                     f"(latest data: {format_date(result.latest_date)}).")
        return "\n".join(lines)

    lines.append(
        f"{summary.total_occurrences} occurrence(s) of {result.padded_query} "
        f"({result.mode.value}) on {summary.unique_dates} date(s), "
        f"latest data: {format_date(result.latest_date)}, predicting for {format_date(result.target_date)}"
    )
    lines.append("")
    lines.append("Predictions by pattern:")
    for prediction in result.group_predictions:
        digits = ",".join(str(d) for d in prediction.digits)
        lines.append(
            f"  [{digits}] -> {', '.join(prediction.predicted_numbers)} "
            f"({prediction.confidence}, continuity {prediction.continuity.score:.2f})"
        )

    lines.append("")
    lines.append("Occurrences:")
    # matches are already most recent first
    for index, (draw_date, items) in enumerate(groupby(result.matches, key=lambda m: m.date)):
        if index >= max_dates:
            lines.append("  ...")
            break
        items = list(items)
        lines.append(f"  {format_date(draw_date)}  ({len(items)} entries)")
        for item in items:
            groups = " ".join(item.groups) or "no known pattern"
            lines.append(
                f"    {item.slot:>6}  {item.number}  [{groups}]  -> {', '.join(item.predicted_numbers)}"
            )

    return "\n".join(lines)
