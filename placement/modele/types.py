from __future__ import annotations

from enum import Enum
from typing import Optional


class Genre(str, Enum):
    """Genre d'un élève.

    Hérite de `str` pour une sérialisation JSON directe (valeur = code court).
    """

    MASCULIN = "M"
    FEMININ = "F"
    AUTRE = "O"

    @classmethod
    def depuis_texte(cls, texte: str) -> Optional["Genre"]:
        """Interprète `M`, `MALE`, `F`, `FEMALE`, `O`, `OTHER` (casse ignorée).

        Retourne `None` si le texte n'est pas reconnu.
        """
        normalise: str = (texte or "").strip().upper()
        return _ALIAS_GENRES.get(normalise)


_ALIAS_GENRES: dict[str, Genre] = {
    "M": Genre.MASCULIN,
    "MALE": Genre.MASCULIN,
    "F": Genre.FEMININ,
    "FEMALE": Genre.FEMININ,
    "O": Genre.AUTRE,
    "OTHER": Genre.AUTRE,
}


class ModeGenre(str, Enum):
    """Politique globale de composition des binômes."""

    AUCUN = "none"
    MEME = "same"
    DIFFERENT = "different"


class PreferenceRang(str, Enum):
    """Préférence de rang d'un élève (0 = premier rang, côté tableau)."""

    DEVANT = "front"
    FOND = "back"
    AUCUNE = "none"
