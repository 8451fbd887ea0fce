"""
Affirmations
Positive affirmations shown on the home screen.
"""

from datetime import datetime
from typing import Optional
from safespace.utils.timeutil import epoch_millis

AFFIRMATIONS = (
    "Tu fais de ton mieux, et c'est suffisant.",
    "Ce que tu ressens est valide.",
    "Prendre soin de soi n'est pas un luxe, c'est une nécessité.",
    "Chaque petit pas compte.",
    "Tu n'es pas seul(e) dans ce que tu traverses.",
    "La paix commence par une seule respiration.",
    "Tu as le droit de prendre du temps pour toi.",
    "Les émotions sont comme les nuages : elles passent.",
    "Aujourd'hui est un nouveau départ.",
    "Tu es plus fort(e) que tu ne le penses.",
    "Respire. Tout va bien se passer.",
    "Ton bien-être est important.",
)


def pick_affirmation(now: Optional[datetime] = None) -> str:
    """
    Pick an affirmation from the wall clock.

    Not random: the millisecond timestamp modulo the list length. A fixed
    `now` always yields the same affirmation.

    Args:
        now: point in time, defaults to the current time

    Returns:
        the affirmation
    """
    return AFFIRMATIONS[epoch_millis(now) % len(AFFIRMATIONS)]
