NARRATE_SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes NBA statistics in a concise and engaging way. "
    "Base every conclusion strictly on the provided numbers. "
    "Reply in plain text without using Markdown formatting, bold, italics, or asterisks."
)

COMPARE_INSTRUCTION = (
    "Compare these players and determine who is having the better {season} season overall. "
    "Consider all provided metrics (points, assists, rebounds, steals, blocks, shooting percentages) "
    "and briefly explain your reasoning without inventing stats."
)

SUMMARY_INSTRUCTION = (
    "Summarize these {metric_name} results for the {season} season{context}. "
    "Highlight the top performers in 1-2 sentences."
)

NARRATE_PROMPT = """{instruction}

{rows}
"""
