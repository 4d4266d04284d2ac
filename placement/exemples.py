from __future__ import annotations

from typing import List

from .editions import (
    ajouter_contrainte,
    definir_eleves,
    definir_mode_genre,
    definir_nom_classe,
    definir_preference_rang,
    deplacer_eleve,
    nouveau_plan,
)
from .contraintes.binaires import DevraientEtreVoisins, NeDoiventPasEtreVoisins
from .modele.eleve import Eleve
from .modele.plan import Plan
from .modele.position import Position
from .modele.types import Genre, ModeGenre, PreferenceRang
from .persistance import plan_vers_json
from .solveurs.score import score_total

GRAINE: int = 42


def construire_exemple() -> Plan:
    """
    construit une classe de 14 élèves, ajoute quelques contraintes et un
    déplacement manuel, et retourne le plan obtenu (reproductible grâce à la graine).
    """
    prenoms = ["Alice", "Bruno", "Chloé", "David", "Emma", "Farid", "Gaëlle",
               "Hugo", "Inès", "Jules", "Katia", "Léo", "Manon", "Nathan"]
    eleves: List[Eleve] = [
        Eleve(prenom=p, nom=f"DUPONT {chr(65 + i)}", genre=Genre.FEMININ if i % 2 == 0 else Genre.MASCULIN,
              identifiant=f"e{i:02d}")
        for i, p in enumerate(prenoms)
    ]

    plan: Plan = definir_nom_classe(nouveau_plan(), "5e B")
    plan = definir_eleves(plan, eleves, seed=GRAINE)
    plan = ajouter_contrainte(plan, NeDoiventPasEtreVoisins("e00", "e01"), seed=GRAINE)
    plan = ajouter_contrainte(plan, DevraientEtreVoisins("e02", "e04"), seed=GRAINE)
    plan = definir_preference_rang(plan, "e05", PreferenceRang.DEVANT, seed=GRAINE)
    plan = definir_preference_rang(plan, "e06", PreferenceRang.FOND, seed=GRAINE)
    plan = definir_mode_genre(plan, ModeGenre.DIFFERENT, seed=GRAINE)
    return deplacer_eleve(plan, "e07", Position(0, 0))


def run_exemple() -> None:
    """affiche la grille, le score et l'export JSON du plan d'exemple."""
    plan = construire_exemple()

    print(f"=== {plan.nom_classe} : grille {plan.nb_rangs()}x{plan.nb_colonnes()} ===")
    index = plan.index_eleves()
    for r in range(plan.nb_rangs()):
        cases = []
        for c in range(plan.nb_colonnes()):
            sid = plan.grille.lire(Position(r, c))
            nom = index[sid].affichage_court() if sid in index else "."
            cases.append(f"{nom:12s}")
            if c % 2 == 1:
                cases.append("|")
        print(" ".join(cases))

    print(f"\nscore : {score_total(plan):.1f}")
    for c in plan.contraintes:
        etat = "ok" if c.est_satisfaite(plan.grille) else "non respectée"
        print(f" - {c.texte_humain(plan.noms_affiches())} : {etat}")

    print("\n=== export JSON ===")
    print(plan_vers_json(plan))


def main() -> None:
    """point d'entrée du module CLI."""
    run_exemple()


if __name__ == "__main__":
    main()
