from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PlayerStatRow(BaseModel):
    """One player's season line; columns a source does not populate stay None.

    Percentages are raw fractions (0-1).
    """

    model_config = ConfigDict(extra="allow")

    full_name: str
    team: str | None = None
    games_played: int | None = None
    minutes: float | None = None
    ppg: float | None = None
    apg: float | None = None
    rpg: float | None = None
    spg: float | None = None
    bpg: float | None = None
    fg_pct: float | None = None
    three_pct: float | None = None
    ft_pct: float | None = None
    tpm: float | None = None
    tpa: float | None = None
    ftm: float | None = None
    fta: float | None = None
    off_rating: float | None = None
    def_rating: float | None = None
    net_rating: float | None = None
    pie: float | None = None
    e_pace: float | None = None
    fga_pg: float | None = None
    fgm_pg: float | None = None
    ts_pct: float | None = None
    ast_pct: float | None = None
    efg_pct: float | None = None
    reb_pct: float | None = None
    usg_pct: float | None = None
    dreb_pct: float | None = None
    oreb_pct: float | None = None
    ast_ratio: float | None = None
    e_tov_pct: float | None = None
    e_usg_pct: float | None = None

    def value_of(self, metric: str) -> float | None:
        return getattr(self, metric, None)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamPlayer(_CamelModel):
    full_name: str
    team: str
    ppg: float
    apg: float | None = None
    rpg: float | None = None
    games_played: int


class TeamData(_CamelModel):
    team_id: int
    team: str
    team_name: str
    wins: int
    losses: int
    win_pct: float
    conference: str
    seed: int | None = None
    top_scorers: list[TeamPlayer] | None = None

    # Populated only when ranking by a team_* metric
    points: float | None = None
    fgm: float | None = None
    fga: float | None = None
    fg_pct: float | None = None
    fta: float | None = None
    ftm: float | None = None
    ft_pct: float | None = None
    fg3a: float | None = None
    fg3m: float | None = None
    fg3_pct: float | None = None
    pace: float | None = None
    efg_pct: float | None = None
    ts_pct: float | None = None
    defensive_rating: float | None = None
    offensive_rating: float | None = None
    net_rating: float | None = None


class StandingEntry(_CamelModel):
    team_id: int
    team: str
    seed: int | None = None
    wins: int
    losses: int
    games_back: str
