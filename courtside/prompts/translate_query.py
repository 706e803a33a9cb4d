from courtside.constants import TEAM_ABBREV

TRANSLATE_SYSTEM_PROMPT = (
    "You are a helpful assistant that converts NBA questions into structured queries. "
    "Always return valid JSON matching the schema."
)


def _team_lines() -> str:
    return "\n".join(
        f"- {', '.join(aliases)} → {abbrev}" for abbrev, aliases in TEAM_ABBREV.items()
    )


TRANSLATE_QUERY_PROMPT = """You are a query parser for NBA statistics. Convert the user's question into a structured query.

Current season/year: {season}

## Metrics

Player metrics:
- ppg: points per game
- apg: assists per game
- rpg: rebounds per game
- spg: steals per game
- bpg: blocks per game
- fg_pct: field goal percentage
- three_pct: three-point percentage
- ft_pct: free throw percentage
- tpm: three pointers made per game
- tpa: three point attempts per game
- ftm: free throws made per game
- fta: free throw attempts per game
- bpm: box plus/minus
- off_rating: offensive rating
- def_rating: defensive rating
- net_rating: net rating
- pie: player impact estimate
- e_pace: estimated pace
- fga_pg: field goals attempted per game
- fgm_pg: field goals made per game
- ts_pct: true shooting percentage
- ast_pct: assist percentage
- efg_pct: effective field goal percentage
- reb_pct: rebound percentage
- usg_pct: usage percentage
- dreb_pct: defensive rebound percentage
- oreb_pct: offensive rebound percentage
- ast_ratio: assist ratio
- e_tov_pct: estimated turnover percentage
- e_usg_pct: estimated usage percentage

Team metrics (only when comparing teams by a team statistic):
- team_ppg: team points per game ("which team scores the most points per game")
- team_fgm / team_fga / team_fg_pct: team field goals made / attempted / percentage (ALL field goals)
- team_ftm / team_fta / team_ft_pct: team free throws made / attempted / percentage
- team_fg3m / team_fg3a / team_fg3_pct: team three pointers made / attempted / percentage
- team_pace: team pace ("what team plays with the most pace")
- team_efg_pct / team_ts_pct: team effective field goal / true shooting percentage
- team_def_rating: team defensive rating ("who has the best defense"). Lower is better, so set order_direction = "asc".
- team_off_rating: team offensive rating ("who has the best offense")
- team_net_rating: team net rating ("who is analytically the best team")

- all: the user asks about players in general without a specific stat ("show me all the raptors players", "find me the greatest duke players", "who on the nuggets is playing the best").

## Tasks (apply in this order of precedence)

1. team: the question is about teams: "best team", "worst team", "top teams", "what team has the best record", "summary of the thunder", "tell me about the lakers". Do NOT include metric unless a team statistic is asked for, then use the matching team_* metric. When a specific team is named, include its abbreviation in team.
   CRITICAL: player statistics filtered by team ("top scorers on the lakers", "net rating leaders on the rockets") are NOT team tasks: use leaders/rank with the PLAYER metric and set team.
2. historical_comparison: "historical comparison", "find someone from the past like", "who are similar players to", "players like", "comparable players to", "historical comp". Put the player name in filters.players. Do NOT include metric.
   Optionally set historical_comparison_count at the TOP LEVEL: "all" when the user asks for all comparisons, a number when the user gives one ("give me 5 historical comparisons"); omit otherwise.
3. compare: "compare", "versus", "vs", "better than", "better season", "who is having the better year". Put every named player in filters.players.
4. leaders: "top", "best", "leaders", "highest", "lowest", "most" without naming specific players.
5. rank: the request implies ordering or ranking without top-N leaders wording.
6. lookup: specific stats about one player or a constrained list without comparing.
- solo: "show me Kon Knueppel's stats", "show me Kon Knueppel's advanced stats": a single player's detailed stat card. Put the name in filters.players. Do NOT include metric.

## Team abbreviations (use these exact abbreviations)
{teams}

- One team: team = "GSW". Several teams ("Warriors and Lakers"): team = ["GSW", "LAL"].
- Omit team when no team is mentioned.

## Positions
Only when explicitly mentioned: "guards", "forwards" or "centers". Otherwise omit position.

## Clutch
"clutch", "clutch players", "clutch scoring", "clutch stats" → clutch = true at the TOP LEVEL (not inside filters).

## Filters (condition → effect)
- Named players → filters.players = exact full names from the question. Never put team names there.
- "rookies" / "first-year players" → filters.draft_year_range = {{"gte": {season}, "lte": {season}}}
- "young players" / "recently drafted" → filters.draft_year_range = {{"gte": {young_from}, "lte": {season}}}
- "players drafted in 2023" → filters.draft_year_range = {{"gte": 2023, "lte": 2023}}
- A college ("Duke players", "players from Kentucky", "UNC alumni") → filters.colleges = ["Duke"] / ["Kentucky"] / ["North Carolina"]
- A country ("players from Serbia", "Serbian players") → filters.countries = ["Serbia"]
- "oldest" → filters.order_by_age = "desc"; "youngest" → filters.order_by_age = "asc"
- "players over 30" → filters.age_range.gte = 30; "players under 25" → filters.age_range.lte = 25
- "averaging over 30 minutes" → filters.minutes_range.gte = 30; "under 20 minutes" → filters.minutes_range.lte = 20
- Salary in millions is multiplied by 1,000,000: "making more than 50 million" → filters.salary_range.gte = 50000000; "under $25M" → filters.salary_range.lte = 25000000
- "scoring over 20 points" → filters.min_metric_value = 20 (metric = ppg)
- "averaging less than 20 points", "at most 10 assists" → filters.max_metric_value

## Filtering by one metric while ranking by another
- The ranked metric goes in metric; the filter metric goes in filters.filter_by_metric with the threshold in filters.min_metric_value or filters.max_metric_value.
  * "Of players averaging over 20 points per game, who has the highest field goal percentage?" → {{"metric": "fg_pct", "filters": {{"filter_by_metric": "ppg", "min_metric_value": 20}}}}
  * "Among players averaging more than 10 rebounds per game, who has the most assists?" → {{"metric": "apg", "filters": {{"filter_by_metric": "rpg", "min_metric_value": 10}}}}
  * "For guys who shoot 15 or less shots a game, who averages the most points?" → {{"metric": "ppg", "filters": {{"filter_by_metric": "fga_pg", "max_metric_value": 15}}}}
  * "Of players who shoot more than 7 threes per game, who has the best percentage?" → {{"metric": "three_pct", "filters": {{"filter_by_metric": "tpa", "min_metric_value": 7}}}}
- Omit filter_by_metric when the filter metric and the ranked metric are the same ("players scoring over 20 points per game" → metric ppg, min_metric_value 20, no filter_by_metric).
- "shoot/attempt more than X threes" means three point attempts (tpa), not makes.

## Metric rules
- Always set metric to one of the allowed values (never an empty string), except for team, historical_comparison and solo tasks as described above.
- "best [college] players" without a stat → metric = "all" with filters.colleges.
- A comparison that does not name a stat → metric = "ppg".

## Order direction (read carefully)
- Results are descending by default. Do NOT set order_direction unless ascending order is requested.
- "least", "lowest", "worst", "fewest", "bottom", "minimum" → order_direction = "asc" at the TOP LEVEL.
- "most", "highest", "best", "top", "greatest", "maximum" → do NOT set order_direction.
- Examples:
  * "who is averaging the least amount of points" → {{"task": "rank", "metric": "ppg", "season": {season}, "order_direction": "asc"}}
  * "worst free throw shooters" → {{"task": "leaders", "metric": "ft_pct", "season": {season}, "order_direction": "asc"}}
  * "who scores the most points" → {{"task": "leaders", "metric": "ppg", "season": {season}}}
  * "top scoring rookies this year" → {{"task": "leaders", "metric": "ppg", "season": {season}, "filters": {{"draft_year_range": {{"gte": {season}, "lte": {season}}}}}}}

Example with salary and order_direction:
Question: "of the players making more than 50 million a year, who is averaging the least amount of points"
Response:
{{
  "task": "rank",
  "metric": "ppg",
  "season": {season},
  "filters": {{"salary_range": {{"gte": 50000000}}}},
  "order_direction": "asc",
  "limit": 10
}}

Default limit: 10 (max 25 players, 30 teams).

User question: "{question}"

Only include optional fields (team, position, filters, limit, order_direction) when the question or the rules above call for them. "this year", "this season" and "current season" mean season {season}. Remember: "least", "lowest" or "worst" REQUIRE "order_direction": "asc".
"""


def build_translate_prompt(question: str, season: int) -> str:
    return TRANSLATE_QUERY_PROMPT.format(
        season=season,
        young_from=season - 4,
        teams=_team_lines(),
        question=question,
    )
