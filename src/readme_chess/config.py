"""
Configuration and environment loading for README Chess.

- load_settings() reads data/settings.yaml (YAML) into frozen dataclasses: comment
  templates, README markers, new-issue link templates, labels and display limits.
  Missing templates or markers are rejected at load time.
- RUNTIME exposes the process knobs (token, repository, issue number, workspace,
  owner) read from the environment; a .env file is honoured.
- Workspace maps artifact names to paths under one root directory.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.environ.get(name)
    if env is not None and env != "":
        return cast(env) if cast else env
    return default


# ---------------- settings.yaml -----------------
@dataclass(frozen=True)
class Comments:
    """Reply templates keyed by outcome. Placeholders: {author} {move} {outcome} {players} {num_moves} {num_players}."""

    successful_new_game: str
    invalid_new_game: str
    successful_move: str
    invalid_move: str
    invalid_board: str
    consecutive_moves: str
    unknown_command: str
    no_active_game: str
    game_over: str

    def get(self, key: str) -> str:
        return getattr(self, key)


@dataclass(frozen=True)
class Marker:
    begin: str
    end: str


@dataclass(frozen=True)
class Markers:
    board: Marker
    moves: Marker
    turn: Marker
    last_moves: Marker
    top_moves: Marker


@dataclass(frozen=True)
class IssueLinks:
    # link: "https://github.com/{repo}/issues/new?{params}"; move/new_game: query params (title, body)
    link: str
    move: Mapping[str, str]
    new_game: Mapping[str, str]


@dataclass(frozen=True)
class Labels:
    invalid: str = "Invalid"
    capture: str = "⚔️ Capture!"
    winner: str = "👑 Winner!"
    draw: str = "👑 Draw!"
    white: str = "White"
    black: str = "Black"


@dataclass(frozen=True)
class Misc:
    max_top_moves: int = 10
    max_last_moves: int = 5


@dataclass(frozen=True)
class Settings:
    comments: Comments
    markers: Markers
    issues: IssueLinks
    labels: Labels = field(default_factory=Labels)
    misc: Misc = field(default_factory=Misc)


def _section(data: Mapping[str, Any], name: str, *, required: bool = True) -> Mapping[str, Any]:
    value = data.get(name)
    if value is None and not required:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"settings: '{name}' must be a mapping")
    return value


def _required_strings(section: Mapping[str, Any], prefix: str, keys: list[str]) -> dict[str, str]:
    missing = [k for k in keys if not isinstance(section.get(k), str)]
    if missing:
        raise ConfigurationError(f"settings: missing {', '.join(f'{prefix}.{k}' for k in missing)}")
    return {k: section[k] for k in keys}


def _build_markers(section: Mapping[str, Any]) -> Markers:
    markers = {}
    for f in fields(Markers):
        entry = section.get(f.name)
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"settings: missing markers.{f.name}")
        markers[f.name] = Marker(**_required_strings(entry, f"markers.{f.name}", ["begin", "end"]))
    return Markers(**markers)


def _build_issue_links(section: Mapping[str, Any]) -> IssueLinks:
    if not isinstance(section.get("link"), str):
        raise ConfigurationError("settings: missing issues.link")
    params = {}
    for key in ("move", "new_game"):
        value = section.get(key)
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"settings: missing issues.{key}")
        params[key] = {str(k): str(v) for k, v in value.items()}
    return IssueLinks(link=section["link"], **params)


def parse_settings(data: Any) -> Settings:
    """Validate a decoded settings document and build Settings."""
    if not isinstance(data, Mapping):
        raise ConfigurationError("settings: top level must be a mapping")
    comments = _required_strings(
        _section(data, "comments"), "comments", [f.name for f in fields(Comments)]
    )
    labels = _section(data, "labels", required=False)
    misc = _section(data, "misc", required=False)
    try:
        return Settings(
            comments=Comments(**comments),
            markers=_build_markers(_section(data, "markers")),
            issues=_build_issue_links(_section(data, "issues")),
            labels=Labels(**{f.name: str(labels[f.name]) for f in fields(Labels) if f.name in labels}),
            misc=Misc(**{f.name: int(misc[f.name]) for f in fields(Misc) if f.name in misc}),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"settings: {e}") from e


def load_settings(path: str | os.PathLike) -> Settings:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(f"Settings file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Settings file {path} is not valid YAML: {e}") from e
    return parse_settings(data)


# ---------------- Workspace layout -----------------
@dataclass(frozen=True)
class Workspace:
    root: Path

    @property
    def games_dir(self) -> Path:
        return self.root / "games"

    @property
    def current_game(self) -> Path:
        return self.games_dir / "current.pgn"

    @property
    def last_moves(self) -> Path:
        return self.root / "data" / "last_moves.txt"

    @property
    def top_moves(self) -> Path:
        return self.root / "data" / "top_moves.txt"

    @property
    def settings(self) -> Path:
        return self.root / "data" / "settings.yaml"

    @property
    def lock_file(self) -> Path:
        return self.root / "data" / ".chess.lock"

    @property
    def readme(self) -> Path:
        return self.root / "README.md"

    def archive_path(self, when: datetime) -> Path:
        return self.games_dir / when.strftime("game-%Y%m%d-%H%M%S.pgn")


# ---------------- Process environment -----------------
@dataclass(frozen=True)
class Runtime:
    github_token: str
    repository: str  # "owner/name"
    issue_number: int | None
    workspace: str
    owner: str  # "@login"; empty means derive from repository


RUNTIME = Runtime(
    github_token=_get("GITHUB_TOKEN", ""),
    repository=_get("GITHUB_REPOSITORY", ""),
    issue_number=_get("ISSUE_NUMBER", None, cast=int),
    workspace=_get("READMECHESS_WORKSPACE", "."),
    owner=_get("READMECHESS_OWNER", ""),
)


def owner_identity(repository: str, override: str = "") -> str:
    """Identity allowed to restart a game in progress: override, else '@' + repository owner."""
    if override:
        return override if override.startswith("@") else "@" + override
    return "@" + repository.split("/", 1)[0]
