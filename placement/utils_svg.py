from __future__ import annotations

import html
from datetime import date
from typing import List, Optional

from .modele.eleve import Eleve
from .modele.plan import Plan
from .modele.position import Position
from .modele.types import ModeGenre, PreferenceRang
from .solveurs.recherche_locale import positions_epinglees
from .solveurs.score import detail_total, score_total

_LIBELLES_MODE = {
    ModeGenre.AUCUN: "aucune",
    ModeGenre.MEME: "même genre",
    ModeGenre.DIFFERENT: "genres différents",
}

_LIBELLES_PREFERENCE = {
    PreferenceRang.DEVANT: "devant",
    PreferenceRang.FOND: "au fond",
}


def lignes_resume(plan: Plan) -> List[str]:
    """Résumé lisible : mode de genre, contraintes, préférences, épingles puis détail du score."""
    noms = plan.noms_affiches()
    lignes: List[str] = [f"Binômes : {_LIBELLES_MODE[plan.mode_genre]}"]
    for c in plan.contraintes:
        etat: str = "ok" if c.est_satisfaite(plan.grille) else "non respectée"
        lignes.append(f"{c.texte_humain(noms)} ({etat})")
    for sid, pref in plan.preferences_rang.items():
        lignes.append(f"{noms.get(sid, sid)} : {_LIBELLES_PREFERENCE.get(pref, pref.value)}")
    for sid, pos in plan.epingles.items():
        lignes.append(f"{noms.get(sid, sid)} : placé à la main (rang {pos.rang + 1}, place {pos.colonne + 1})")
    d = detail_total(plan)
    lignes.append(
        f"Score : {d.total:.0f} (rangs {d.rang:+.0f}, binômes {d.paire:+.0f}, genre {d.genre:+.0f})"
    )
    return lignes


def svg_depuis_plan(plan: Plan, jour: Optional[date] = None, width_min: int = 600) -> str:
    """
    Génère un SVG autonome résumant le plan : grille (tables de deux mises en
    évidence, tableau en haut), liste alphabétique des élèves, résumé des
    contraintes et du mode de genre.
    """
    padX, padY = 24, 20
    seatW, seatH = 110, 54
    pairGap, rowGap = 26, 18
    sideW, lineH = 300, 16

    nb_rangs, nb_colonnes = plan.nb_rangs(), plan.nb_colonnes()
    nb_tables: int = nb_colonnes // 2
    index = plan.index_eleves()
    epinglees = positions_epinglees(plan.grille, plan)

    gridW = nb_tables * 2 * seatW + max(nb_tables - 1, 0) * pairGap
    gridW = max(gridW, width_min - sideW - 3 * padX)
    titleH, boardH = 56, 18
    gridY = padY + titleH + boardH + 20

    roster: List[Eleve] = sorted(plan.eleves)
    resume: List[str] = lignes_resume(plan)
    gridH = nb_rangs * seatH + max(nb_rangs - 1, 0) * rowGap
    sideH = (len(roster) + len(resume) + 4) * lineH
    totalWidth = padX * 3 + gridW + sideW
    totalHeight = gridY + max(gridH, sideH) + padY

    titre = html.escape(plan.nom_classe or "Plan de classe")
    jour_txt = (jour or date.today()).strftime("%d/%m/%Y")

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{totalWidth}" height="{totalHeight}" '
        f'viewBox="0 0 {totalWidth} {totalHeight}" font-family="Helvetica, Arial, sans-serif">',
        '<rect x="0" y="0" width="100%" height="100%" fill="#ffffff"/>',
        f'<text x="{padX}" y="{padY + 24}" fill="#111827" font-size="22" font-weight="700">{titre}</text>',
        f'<text x="{padX}" y="{padY + 44}" fill="#6b7280" font-size="12">'
        f'{jour_txt} · score {score_total(plan):.0f}</text>',
        f'<rect x="{padX}" y="{padY + titleH}" width="{gridW}" height="{boardH}" rx="6" fill="#1f2937"/>',
        f'<text x="{padX + gridW / 2:.0f}" y="{padY + titleH + 13}" text-anchor="middle" '
        'fill="#e5e7eb" font-size="11" font-weight="600">tableau</text>',
    ]

    for table in plan.grille.tables():
        ox = padX + table.indice * (2 * seatW + pairGap)
        oy = gridY + table.rang * (seatH + rowGap)

        # fond de la table (binôme)
        parts.append(
            f'<rect x="{ox}" y="{oy}" width="{2 * seatW}" height="{seatH}" rx="8" '
            'fill="#f1f5f9" stroke="#94a3b8" stroke-width="1.5"/>'
        )
        parts.append(
            f'<rect x="{ox + seatW}" y="{oy + 6}" width="1" height="{seatH - 12}" fill="#cbd5e1"/>'
        )

        for s, pos in enumerate(table.sieges()):
            sid: Optional[str] = plan.grille.lire(pos)
            if sid is None:
                continue
            eleve: Optional[Eleve] = index.get(sid)
            nom = html.escape(eleve.affichage_court() if eleve else sid)
            cx = ox + s * seatW + seatW / 2
            cy = oy + seatH / 2 + 5
            poids = "700" if sid in epinglees else "500"
            parts.append(
                f'<text x="{cx:.0f}" y="{cy:.0f}" text-anchor="middle" fill="#111827" '
                f'font-size="12" font-weight="{poids}">{nom}</text>'
            )

    # colonne de droite : élèves puis résumé
    sx = padX * 2 + gridW
    y = gridY
    parts.append(f'<text x="{sx}" y="{y}" fill="#111827" font-size="13" font-weight="700">'
                 f'Élèves ({len(roster)})</text>')
    for e in roster:
        y += lineH
        place: Optional[Position] = plan.grille.position_de(e.id())
        ou = f"rang {place.rang + 1}" if place is not None else "non placé"
        parts.append(
            f'<text x="{sx}" y="{y}" fill="#374151" font-size="11">'
            f'{html.escape(e.affichage_nom())} ({e.genre().value}), {ou}</text>'
        )
    y += 2 * lineH
    parts.append(f'<text x="{sx}" y="{y}" fill="#111827" font-size="13" font-weight="700">Contraintes</text>')
    for ligne in resume:
        y += lineH
        parts.append(f'<text x="{sx}" y="{y}" fill="#374151" font-size="11">{html.escape(ligne)}</text>')

    parts.append("</svg>")
    return "".join(parts)

