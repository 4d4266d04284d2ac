"""
Import d'une liste d'élèves depuis un texte CSV.

Une ligne = un élève : au minimum un champ *nom* puis un champ *genre*. Les
lignes invalides ne bloquent pas l'import : elles sont signalées dans
`ResultatImport.erreurs` (numéro de ligne physique, à partir de 1) et les
lignes valides sont importées.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .modele.eleve import Eleve
from .modele.types import Genre

logger = logging.getLogger(__name__)

MOTS_ENTETE: Tuple[str, ...] = ("name", "gender", "student")


@dataclass
class ResultatImport:
    """Élèves reconnus et messages d'erreur, dans l'ordre du fichier."""

    eleves: List[Eleve] = field(default_factory=list)
    erreurs: List[str] = field(default_factory=list)


def decouper_nom(valeur: str) -> Optional[Tuple[str, str]]:
    """Retourne `(prenom, nom)`.

    Essaie « Nom, Prénom », puis « Prénom Nom… » ; un mot seul devient le
    prénom (nom vide). Retourne `None` pour une chaîne vide.
    """
    texte: str = valeur.strip()
    if "," in texte:
        morceaux = [m.strip() for m in texte.split(",")]
        if len(morceaux) >= 2 and morceaux[0] and morceaux[1]:
            return morceaux[1], morceaux[0]
    mots: List[str] = texte.split()
    if len(mots) >= 2:
        return mots[0], " ".join(mots[1:])
    if texte:
        return texte.strip(","), ""
    return None


def est_entete(champs: List[str]) -> bool:
    """Heuristique : une cellule contient `name`, `gender` ou `student`."""
    return any(mot in champ.lower() for champ in champs for mot in MOTS_ENTETE)


def _champs_nom_genre(champs: List[str]) -> Tuple[str, str]:
    """Choisit les champs *nom* et *genre* d'une ligne.

    Avec trois champs ou plus dont le deuxième n'est pas un genre, la ligne est
    lue comme « Nom, Prénom, Genre » (nom non entouré de guillemets).
    """
    if len(champs) >= 3 and Genre.depuis_texte(champs[1]) is None:
        return f"{champs[0]}, {champs[1]}", champs[2]
    return champs[0], champs[1]


def parser_csv(texte: str) -> ResultatImport:
    """Analyse le texte CSV complet et retourne élèves et erreurs."""
    resultat = ResultatImport()
    lignes: List[Tuple[int, str]] = [
        (numero, ligne) for numero, ligne in enumerate(texte.splitlines(), start=1) if ligne.strip()
    ]
    if not lignes:
        resultat.erreurs.append("Fichier vide")
        return resultat

    premiere: bool = True
    for numero, ligne in lignes:
        champs: List[str] = [c.strip() for c in next(csv.reader(io.StringIO(ligne), skipinitialspace=True), [])]
        if premiere:
            premiere = False
            if est_entete(champs):
                continue

        if len(champs) < 2:
            resultat.erreurs.append(
                f"Ligne {numero} : au moins 2 colonnes attendues (nom, genre), {len(champs)} trouvée(s)"
            )
            continue

        champ_nom, champ_genre = _champs_nom_genre(champs)

        nom = decouper_nom(champ_nom)
        if nom is None:
            resultat.erreurs.append(f"Ligne {numero} : nom invalide {champ_nom!r}")
            continue

        genre: Optional[Genre] = Genre.depuis_texte(champ_genre)
        if genre is None:
            resultat.erreurs.append(f"Ligne {numero} : genre invalide {champ_genre!r} (attendu M/F/O)")
            continue

        prenom, nom_famille = nom
        resultat.eleves.append(Eleve(prenom=prenom, nom=nom_famille, genre=genre))

    logger.info("import CSV: %d élève(s), %d erreur(s)", len(resultat.eleves), len(resultat.erreurs))
    return resultat
