import logging

from courtside.constants import PERCENTAGE_METRICS
from courtside.prompts.narrate import COMPARE_INSTRUCTION, NARRATE_PROMPT, NARRATE_SYSTEM_PROMPT, SUMMARY_INSTRUCTION
from courtside.schemas.query import Query
from courtside.schemas.results import PlayerStatRow

logger = logging.getLogger(__name__)

NO_RESULTS = "No qualified players matched your filters."


def is_percentage(metric: str) -> bool:
    return metric in PERCENTAGE_METRICS or metric.endswith("_pct")


def format_number(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else "0.0"


def format_pct(value: float | None) -> str:
    """Stored fractions are shown as percentages."""
    return f"{value * 100:.1f}%" if value is not None else "0.0%"


def format_metric_value(metric: str, value: float | None) -> str:
    return format_pct(value) if is_percentage(metric) else format_number(value)


def _label(row: PlayerStatRow) -> str:
    return f"{row.full_name} ({row.team or 'N/A'})"


def full_stat_line(row: PlayerStatRow) -> str:
    return (
        f"PPG: {format_number(row.ppg)}, APG: {format_number(row.apg)}, RPG: {format_number(row.rpg)}, "
        f"SPG: {format_number(row.spg)}, BPG: {format_number(row.bpg)}, "
        f"FG%: {format_pct(row.fg_pct)}, 3P%: {format_pct(row.three_pct)}, FT%: {format_pct(row.ft_pct)}"
    )


def _wants_full_line(query: Query) -> bool:
    return query.task == "compare" or query.metric == "all"


def format_rows(query: Query, rows: list[PlayerStatRow]) -> str:
    lines = []
    for index, row in enumerate(rows, 1):
        if _wants_full_line(query):
            lines.append(f"{index}. {_label(row)} - {full_stat_line(row)}")
        else:
            value = format_metric_value(query.metric, row.value_of(query.metric))
            lines.append(f"{index}. {_label(row)} - {value}")
    return "\n".join(lines)


def simple_summary(query: Query, rows: list[PlayerStatRow]) -> str:
    """Template summary used whenever the model cannot narrate."""
    if not rows:
        return NO_RESULTS

    top = rows[0]
    second = rows[1] if len(rows) > 1 else None

    if _wants_full_line(query):
        if second is None:
            return f"{_label(top)} leads with {full_stat_line(top)}."
        return f"{_label(top)} posts {full_stat_line(top)}; {_label(second)} posts {full_stat_line(second)}."

    metric = query.metric
    value = format_metric_value(metric, top.value_of(metric))

    if query.task in ("leaders", "rank"):
        if second is None:
            return f"{_label(top)} leads the {query.season} season with {value} {metric}."
        second_value = format_metric_value(metric, second.value_of(metric))
        return f"{_label(top)} leads with {value} {metric}, followed by {_label(second)} at {second_value}."

    return f"Top {metric} performers: {_label(top)} with {value}."


def _instruction(query: Query) -> str:
    if _wants_full_line(query):
        return COMPARE_INSTRUCTION.format(season=query.season)
    context = []
    if query.team:
        team = ", ".join(query.team) if isinstance(query.team, list) else query.team
        context.append(f"team: {team}")
    if query.position:
        context.append(f"position: {query.position}")
    if query.players:
        context.append(f"players: {', '.join(query.players)}")
    return SUMMARY_INSTRUCTION.format(
        metric_name=query.metric.replace("_", " ").upper(),
        season=query.season,
        context=f" with filters: {', '.join(context)}" if context else "",
    )


async def summarize_answer(llm, query: Query, rows: list[PlayerStatRow]) -> str:
    """Narrate the top rows; falls back to ``simple_summary`` and never fails."""
    if not rows:
        return NO_RESULTS

    top_rows = rows[:5]
    prompt = NARRATE_PROMPT.format(instruction=_instruction(query), rows=format_rows(query, top_rows))
    try:
        summary = await llm.chat_completion(
            messages=[
                {"role": "system", "content": NARRATE_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=400,
        )
    except Exception:
        logger.warning("Summary generation failed; using template summary", exc_info=True)
        return simple_summary(query, top_rows)

    summary = (summary or "").strip()
    return summary or simple_summary(query, top_rows)
