# placement/__main__.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _run_exemple() -> int:
    from .exemples import run_exemple

    run_exemple()
    return 0


def _run_importer(chemin: str, sortie: str | None) -> int:
    """Analyse un CSV d'élèves et écrit la liste au format JSON."""
    from .import_csv import parser_csv

    resultat = parser_csv(Path(chemin).read_text(encoding="utf-8-sig"))
    for erreur in resultat.erreurs:
        print(erreur, file=sys.stderr)
    texte = json.dumps([e.code_machine() for e in resultat.eleves], ensure_ascii=False, indent=2)
    if sortie:
        Path(sortie).write_text(texte, encoding="utf-8")
    else:
        print(texte)
    return 0 if resultat.eleves else 1


def _run_placer(chemin: str, seed: int | None) -> int:
    """Recharge un plan sauvegardé, relance le placement et affiche le résultat."""
    from dataclasses import replace

    from .persistance import PlanInvalide, plan_depuis_json, plan_vers_json
    from .solveurs.recherche_locale import generer_placement
    from .solveurs.score import score_total

    try:
        plan = plan_depuis_json(Path(chemin).read_text(encoding="utf-8"))
    except PlanInvalide as e:
        print(f"plan invalide : {e}", file=sys.stderr)
        return 1

    plan = replace(plan, grille=generer_placement(plan, seed=seed))
    print(plan.grille)
    print(f"\nscore : {score_total(plan):.1f}", file=sys.stderr)
    print(plan_vers_json(plan))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="placement",
        description="Outils en ligne de commande pour les plans de classe."
    )
    sub = parser.add_subparsers(dest="cmd")

    p_ex = sub.add_parser("exemple", help="Exécute le scénario d’exemple.")
    p_ex.set_defaults(func=lambda a: _run_exemple())

    p_imp = sub.add_parser("importer", help="Convertit un CSV d’élèves en JSON.")
    p_imp.add_argument("csv", help="fichier CSV (Nom, Prénom, Genre ou Prénom Nom, Genre)")
    p_imp.add_argument("--sortie", "-o", help="fichier JSON de sortie (défaut : stdout)")
    p_imp.set_defaults(func=lambda a: _run_importer(a.csv, a.sortie))

    p_pl = sub.add_parser("placer", help="Recalcule le placement d’un plan sauvegardé.")
    p_pl.add_argument("plan", help="fichier JSON exporté")
    p_pl.add_argument("--seed", type=int, default=None, help="graine (placement reproductible)")
    p_pl.set_defaults(func=lambda a: _run_placer(a.plan, a.seed))

    # défaut: si aucune sous-commande n’est fournie, on lance l’exemple
    args = parser.parse_args(argv)
    if not args.cmd:
        return _run_exemple()

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
