from __future__ import annotations

from enum import Enum


class TypeContrainte(str, Enum):
    """Enum centralisant les types logiques de contraintes.

    Hérite de `str` pour une sérialisation JSON directe (valeur = nom stable).
    """

    # Binaires (paire d'élèves)
    INTERDIT = "ban"
    PREFERENCE = "prefer"

    # Ancien marqueur d'épinglage (paire réflexive) : lu au chargement, jamais produit
    MANUEL = "manual"
