"""Geradores de identificadores."""

from __future__ import annotations

import random
import time
import uuid


def new_session_id() -> str:
    """Gera um session_id opaco e único."""

    return str(uuid.uuid4())


def new_customer_id(rng: random.Random) -> str:
    """Gera o id do perfil: timestamp em ms + sufixo aleatório."""

    return f"customer_{int(time.time() * 1000)}_{rng.randrange(10000)}"
