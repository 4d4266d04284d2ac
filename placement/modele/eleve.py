from __future__ import annotations

import uuid
from typing import Any, Dict, Mapping, Optional

from .types import Genre


class Eleve:
    """Modélise un élève plaçable dans un plan de classe.


    Paramètres du constructeur
    --------------------------
    prenom : str
    Prénom tel que saisi.
    nom : str
    Nom de famille (peut être vide quand l'import n'a trouvé qu'un seul mot).
    genre : Genre
    Genre de l'élève.
    identifiant : Optional[str]
    Identifiant opaque ; un identifiant aléatoire est généré s'il est absent.


    Détails d'implémentation
    ------------------------
    - Un élève est immuable : un ré-import remplace les objets en bloc.
    - L'égalité et le hachage reposent uniquement sur l'identifiant.
    """

    __slots__ = ("_id", "_prenom", "_nom", "_genre")

    def __init__(self, prenom: str, nom: str, genre: Genre, identifiant: Optional[str] = None) -> None:
        self._id: str = identifiant if identifiant else uuid.uuid4().hex[:12]
        self._prenom: str = prenom.strip()
        self._nom: str = nom.strip()
        self._genre: Genre = Genre(genre)

    def id(self) -> str:
        """Retourne l'identifiant opaque."""
        return self._id

    def prenom(self) -> str:
        """Retourne le prénom."""
        return self._prenom

    def nom(self) -> str:
        """Retourne le nom de famille."""
        return self._nom

    def genre(self) -> Genre:
        """Retourne le genre de l'élève."""
        return self._genre

    def affichage_nom(self) -> str:
        """Retourne la chaîne à afficher (« Nom Prénom », ou le prénom seul)."""
        if not self._nom:
            return self._prenom
        return f"{self._nom} {self._prenom}"

    def affichage_court(self) -> str:
        """Forme compacte pour une case de la grille : « Nom, P. »."""
        if not self._nom:
            return self._prenom
        initiale: str = f" {self._prenom[0]}." if self._prenom else ""
        return f"{self._nom},{initiale}"

    # --- Sérialisation ---
    def code_machine(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "firstName": self._prenom,
            "lastName": self._nom,
            "gender": self._genre.value,
        }

    @classmethod
    def depuis_code(cls, code: Mapping[str, Any]) -> "Eleve":
        """Reconstitue un élève ; lève `KeyError`/`ValueError` si le code est incomplet."""
        identifiant: str = str(code["id"])
        if not identifiant:
            raise ValueError("identifiant d'élève vide")
        genre: Optional[Genre] = Genre.depuis_texte(str(code.get("gender", "")))
        if genre is None:
            raise ValueError(f"genre inconnu pour l'élève {identifiant!r}: {code.get('gender')!r}")
        return cls(
            prenom=str(code.get("firstName", "")),
            nom=str(code.get("lastName", "")),
            genre=genre,
            identifiant=identifiant,
        )

    # --- Protocole de comparaison / hachage ---
    def __str__(self) -> str:  # pragma: no cover - représentation
        return f"{self.affichage_nom()} ({self._genre.value})"

    def __repr__(self) -> str:  # pragma: no cover - représentation
        return f"Eleve({self._id!r}, {self.affichage_nom()!r})"

    def __hash__(self) -> int:
        return hash(self._id)

    def __eq__(self, autre: object) -> bool:
        return isinstance(autre, Eleve) and self._id == autre._id

    def __lt__(self, autre: "Eleve") -> bool:
        # Tri : nom de famille puis prénom
        if self._nom.lower() != autre._nom.lower():
            return self._nom.lower() < autre._nom.lower()
        return self._prenom.lower() < autre._prenom.lower()
