"""Perfil do homeowner simulado (dado folha, imutável).

Gerado uma vez na criação da sessão e apenas lido pelo core.
"""

from __future__ import annotations

import random
from typing import Literal

from pydantic import BaseModel, ConfigDict

from roleplay_sim.utils.ids import new_customer_id

IncomeBand = Literal["low", "lower-middle", "middle", "upper-middle", "high"]

INCOME_BANDS: tuple[str, ...] = ("low", "lower-middle", "middle", "upper-middle", "high")
BILL_ESTIMATES: tuple[int, ...] = (120, 150, 180, 210, 240, 280, 320)
DECISION_DRIVERS: tuple[str, ...] = (
    "money_savings",
    "avoiding_risk",
    "security_and_outage_protection",
    "long_term_stability",
    "skepticism",
    "speed_and_convenience",
)
TONE_PROFILES: tuple[str, ...] = (
    "friendly",
    "neutral",
    "guarded",
    "annoyed",
    "confused",
    "cautious",
)
COMMUNICATION_STYLES: tuple[str, ...] = (
    "short_and_direct",
    "detailed_and_careful",
    "skeptical_and_slow",
    "friendly_and_chatty",
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Demographics(_Frozen):
    income_band: IncomeBand
    home_type: str
    household_size: int
    homeowner_age_bracket: str


class Financials(_Frozen):
    current_bill_estimate: int
    target_bill_max: int
    absolutely_cannot_exceed: int
    money_stress_level: float


class Personality(_Frozen):
    risk_aversion: float
    trust_in_salespeople: float
    objection_persistence: float
    prefers_short_conversations: bool
    values_outage_protection: bool
    cares_about_environment: bool
    hates_contracts: bool
    primary_decision_driver: str
    tone_profile: str


class Preferences(_Frozen):
    time_to_move_months: int
    communication_style: str


class CustomerProfile(_Frozen):
    """Disposição do homeowner simulado."""

    id: str
    demographics: Demographics
    financials: Financials
    personality: Personality
    preferences: Preferences


def generate_customer_profile(rng: random.Random | None = None) -> CustomerProfile:
    """Gera um perfil plausível; `rng` injetável para testes determinísticos.

    Faixas de renda mais baixas têm teto de conta mais apertado e mais
    estresse financeiro.
    """
    rng = rng or random.Random()

    income_band = rng.choice(INCOME_BANDS)
    estimated_bill = rng.choice(BILL_ESTIMATES)

    if income_band == "low":
        target_bill_max = estimated_bill - rng.choice((20, 30, 40))
        money_stress = rng.uniform(0.7, 0.95)
    elif income_band == "lower-middle":
        target_bill_max = estimated_bill - rng.choice((10, 20, 30))
        money_stress = rng.uniform(0.5, 0.85)
    else:
        target_bill_max = estimated_bill - rng.choice((0, 10, 20))
        money_stress = rng.uniform(0.3, 0.7)

    return CustomerProfile(
        id=new_customer_id(rng),
        demographics=Demographics(
            income_band=income_band,
            home_type=rng.choice(("single-family", "townhome", "duplex")),
            household_size=rng.choice((1, 2, 3, 4, 5)),
            homeowner_age_bracket=rng.choice(("25-35", "35-45", "45-55", "55-65", "65+")),
        ),
        financials=Financials(
            current_bill_estimate=estimated_bill,
            target_bill_max=target_bill_max,
            # Limite suave acima do teto desejado
            absolutely_cannot_exceed=target_bill_max + rng.choice((0, 10, 20, 25)),
            money_stress_level=money_stress,
        ),
        personality=Personality(
            risk_aversion=rng.uniform(0.4, 0.95),
            trust_in_salespeople=rng.uniform(0.2, 0.8),
            objection_persistence=rng.uniform(0.3, 0.9),
            prefers_short_conversations=rng.random() < 0.35,
            values_outage_protection=rng.random() < 0.65,
            cares_about_environment=rng.random() < 0.45,
            hates_contracts=rng.random() < 0.55,
            primary_decision_driver=rng.choice(DECISION_DRIVERS),
            tone_profile=rng.choice(TONE_PROFILES),
        ),
        preferences=Preferences(
            time_to_move_months=rng.choice((0, 6, 12, 18, 24, 36, 60)),
            communication_style=rng.choice(COMMUNICATION_STYLES),
        ),
    )
