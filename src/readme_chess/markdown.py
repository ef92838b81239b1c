"""
README rendering.

- board_to_markdown(): the board as an image table, seen from the side to move.
- generate_moves_list(): legal moves as pre-filled "new issue" links.
- generate_last_moves() / generate_top_moves(): recent moves and leaderboard tables.
- update_readme(): splice all of the above between the settings markers.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable
from urllib.parse import urlencode

import chess

from .config import Settings
from .history import MoveRecord
from .templates import render, replace_text_between

IMAGES = MappingProxyType({
    "r": "img/black/rook.png",
    "n": "img/black/knight.png",
    "b": "img/black/bishop.png",
    "q": "img/black/queen.png",
    "k": "img/black/king.png",
    "p": "img/black/pawn.png",
    "R": "img/white/rook.png",
    "N": "img/white/knight.png",
    "B": "img/white/bishop.png",
    "Q": "img/white/queen.png",
    "K": "img/white/king.png",
    "P": "img/white/pawn.png",
    ".": "img/blank.png",
})


def create_link(text: str, link: str) -> str:
    return f"[{text}]({link})"


def _profile_link(identity: str) -> str:
    identity = identity.strip()
    return create_link(identity, "https://github.com/" + identity.lstrip("@"))


def _issue_link(settings: Settings, repository: str, params: dict[str, str]) -> str:
    return render(settings.issues.link, {
        "repo": repository,
        "params": urlencode(params, safe="{}"),
    })


def create_issue_link(settings: Settings, repository: str, source: str, dest_list: Iterable[str]) -> str:
    link = _issue_link(settings, repository, dict(settings.issues.move))
    return ", ".join(
        create_link(dest, render(link, {"source": source, "dest": dest}))
        for dest in sorted(dest_list)
    )


def generate_top_moves(ranking: list[tuple[str, int]]) -> str:
    markdown = "\n"
    markdown += "| Total moves |  User  |\n"
    markdown += "| :---------: | :----- |\n"
    for identity, count in ranking:
        markdown += f"| {count} | {_profile_link(identity)} |\n"
    return markdown + "\n"


def generate_last_moves(settings: Settings, records: list[MoveRecord]) -> str:
    markdown = "\n"
    markdown += "| Move | Author |\n"
    markdown += "| :--: | :----- |\n"
    for rec in list(reversed(records))[: settings.misc.max_last_moves]:
        if rec.is_start_marker or len(rec.move) < 4:
            shown = f"`{rec.move}`"
        else:
            shown = f"`{rec.move[0:2].upper()}` to `{rec.move[2:4].upper()}`"
        markdown += f"| {shown} | {_profile_link(rec.author)} |\n"
    return markdown + "\n"


def generate_moves_list(settings: Settings, repository: str, board: chess.Board) -> str:
    if board.is_game_over():
        link = _issue_link(settings, repository, dict(settings.issues.new_game))
        return f"**GAME IS OVER!** {create_link('Click here', link)} to start a new game :D\n"

    moves: dict[str, set[str]] = {}
    for mv in board.legal_moves:
        source = chess.square_name(mv.from_square).upper()
        moves.setdefault(source, set()).add(chess.square_name(mv.to_square).upper())

    markdown = ""
    if board.is_check():
        markdown += "**CHECK!** Choose your move wisely!\n"
    markdown += "|  FROM  | TO (Just click a link!) |\n"
    markdown += "| :----: | :---------------------- |\n"
    for source in sorted(moves):
        markdown += f"| **{source}** | {create_issue_link(settings, repository, source, moves[source])} |\n"
    return markdown


def board_to_markdown(board: chess.Board) -> str:
    flipped = board.turn == chess.BLACK
    files = list(range(7, -1, -1)) if flipped else list(range(8))
    ranks = list(range(8)) if flipped else list(range(7, -1, -1))
    names = [chess.FILE_NAMES[f].upper() for f in files]

    markdown = "|   | " + " | ".join(names) + " |   |\n"
    markdown += "|---|" + ":-:|" * 9 + "\n"
    for rank in ranks:
        cells = []
        for file in files:
            piece = board.piece_at(chess.square(file, rank))
            cells.append(f'<img src="{IMAGES[piece.symbol() if piece else "."]}" width=50px>')
        markdown += f"| **{rank + 1}** | " + " | ".join(cells) + f" | **{rank + 1}** |\n"
    markdown += "|   | " + " | ".join(f"**{n}**" for n in names) + " |   |\n"
    return markdown


def update_readme(
    readme: str,
    settings: Settings,
    repository: str,
    board: chess.Board,
    last_moves: str,
    top_moves: str,
) -> str:
    turn = "white" if board.turn == chess.WHITE else "black"
    sections = (
        (settings.markers.board, board_to_markdown(board)),
        (settings.markers.moves, generate_moves_list(settings, repository, board)),
        (settings.markers.turn, turn),
        (settings.markers.last_moves, last_moves),
        (settings.markers.top_moves, top_moves),
    )
    for marker, text in sections:
        readme = replace_text_between(readme, marker, text)
    return readme
