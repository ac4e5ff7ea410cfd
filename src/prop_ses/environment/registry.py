from __future__ import annotations

from prop_ses.environment.base import EnvironmentModel, SportFamily
from prop_ses.environment.pace_rank import PaceRankModel
from prop_ses.environment.tempo_efficiency import TempoEfficiencyModel
from prop_ses.models import Proposition

SPORT_FAMILY_ALIASES: dict[str, SportFamily] = {
    "ncaab": "tempo_efficiency",
    "basketball_ncaab": "tempo_efficiency",
    "college": "tempo_efficiency",
    "cbb": "tempo_efficiency",
    "nba": "pace_rank",
    "basketball_nba": "pace_rank",
    "wnba": "pace_rank",
    "basketball_wnba": "pace_rank",
}

FALLBACK_FAMILY: SportFamily = "pace_rank"


def _registry() -> dict[SportFamily, EnvironmentModel]:
    models: list[EnvironmentModel] = [TempoEfficiencyModel(), PaceRankModel()]
    out: dict[SportFamily, EnvironmentModel] = {}
    for model in models:
        if model.family in out:
            raise ValueError(f"duplicate environment family: {model.family}")
        out[model.family] = model
    return out


_MODELS = _registry()


def get_model(family: SportFamily) -> EnvironmentModel:
    model = _MODELS.get(family)
    if model is None:
        options = ",".join(sorted(_MODELS))
        raise ValueError(f"unknown sport family: {family} (options: {options})")
    return model


def resolve_sport_family(prop: Proposition) -> SportFamily:
    """Tempo/efficiency data picks its own family; otherwise the sport tag decides."""
    context = prop.game_context
    if context is not None and (context.has_tempo or context.has_efficiency):
        return "tempo_efficiency"
    sport = (prop.sport or "").strip().lower()
    family = SPORT_FAMILY_ALIASES.get(sport)
    if family is not None:
        return family
    return FALLBACK_FAMILY


def select_model(prop: Proposition) -> EnvironmentModel:
    """Preferred family model when it has its inputs, else the fallback blend."""
    model = get_model(resolve_sport_family(prop))
    if model.applies(prop):
        return model
    return get_model(FALLBACK_FAMILY)
