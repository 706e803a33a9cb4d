CLASSIFY_PROMPT = """Decide whether the following NBA question asks for structured data (player stats, team stats, standings, comparisons) or for general information (explanations, definitions, rules, history).

## Examples

**data**
- "Who are the top scorers?"
- "Compare LeBron and Curry"
- "Who leads in PPG?"
- "What team has the best record?"
- "Find me a historical comparison for Anthony Edwards"
- "Show me players averaging over 25 points per game"

**informational**
- "What is a field goal percentage?"
- "Tell me about the NBA"
- "What is the NBA?"
- "How does the draft work?"
- "How do you play basketball?"

When unsure, answer data.

Respond with exactly one word: data or informational.

Question: {question}
"""
