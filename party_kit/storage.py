"""JSON file storage.

All state is stored in JSON files under a configurable base directory.
There is no database or ORM; reads and writes go through plain helper
methods that load and dump pydantic models.

Directory layout:

    {base}/
      templates/
        {slug}.json             ← user templates (override presets by slug)
      definitions/
        {id}.json               ← game definition
        {id}/
          packs/
            {pack_id}.json      ← card pack with its cards
      sessions/
        {ROOMCODE}.json         ← game session, created exclusively
    {presets}/
      templates/
        {slug}.json             ← built-in templates, merged at read time

Uniqueness rules live here: `(creator_id, slug)` for definitions and the
room code for sessions. A session file is opened with mode "x", so a second
create for the same code fails even if both callers passed the existence
check; callers treat RoomCodeTaken as "allocate again".
"""

from __future__ import annotations

import json
import logging
import re
import shutil
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from party_kit.errors import ConflictError, RoomCodeTaken
from party_kit.models import CardPack, GameDefinition, GameSession, GameTemplate

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "Cards For Everyone!" → "cards-for-everyone"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe(identifier: str) -> bool:
    return bool(_SAFE_ID_RE.match(identifier))


class Storage:
    def __init__(self, base_path: Path, presets_dir: Path | None = None) -> None:
        self._base = base_path
        self._presets = presets_dir
        self._templates_root = base_path / "templates"
        self._defs_root = base_path / "definitions"
        self._sessions_root = base_path / "sessions"
        for root in (self._templates_root, self._defs_root, self._sessions_root):
            root.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _preset_templates_dir(self) -> Path | None:
        if self._presets is None:
            return None
        return self._presets / "templates"

    def _def_file(self, definition_id: str) -> Path:
        return self._defs_root / f"{definition_id}.json"

    def _packs_dir(self, definition_id: str) -> Path:
        return self._defs_root / definition_id / "packs"

    def _session_file(self, room_code: str) -> Path:
        return self._sessions_root / f"{room_code}.json"

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text())

    # ------------------------------------------------------------------
    # Templates (presets merged with user data; user wins on slug)
    # ------------------------------------------------------------------

    def list_templates(self) -> list[GameTemplate]:
        by_slug: dict[str, GameTemplate] = {}
        preset_dir = self._preset_templates_dir()
        # Presets first (lower priority)
        if preset_dir is not None and preset_dir.is_dir():
            for path in sorted(preset_dir.glob("*.json")):
                data = self._read_json(path)
                data["slug"] = path.stem
                by_slug[path.stem] = GameTemplate.model_validate(data)
        for path in sorted(self._templates_root.glob("*.json")):
            by_slug[path.stem] = GameTemplate.model_validate_json(path.read_text())
        return list(by_slug.values())

    def get_template(self, slug: str) -> GameTemplate | None:
        if not _safe(slug):
            return None
        user_path = self._templates_root / f"{slug}.json"
        if user_path.is_file():
            return GameTemplate.model_validate_json(user_path.read_text())
        preset_dir = self._preset_templates_dir()
        if preset_dir is not None:
            preset_path = preset_dir / f"{slug}.json"
            if preset_path.is_file():
                data = self._read_json(preset_path)
                data["slug"] = slug
                return GameTemplate.model_validate(data)
        return None

    def get_template_by_id(self, template_id: str) -> GameTemplate | None:
        for template in self.list_templates():
            if template.id == template_id:
                return template
        return None

    def save_template(self, template: GameTemplate) -> None:
        path = self._templates_root / f"{template.slug}.json"
        path.write_text(template.model_dump_json(indent=2))

    # ------------------------------------------------------------------
    # Game definitions
    # ------------------------------------------------------------------

    def slug_taken(self, creator_id: str, slug: str) -> bool:
        return any(
            d.slug == slug for d in self.list_definitions(creator_id=creator_id)
        )

    def create_definition(self, definition: GameDefinition) -> GameDefinition:
        if self.slug_taken(definition.creator_id, definition.slug):
            raise ConflictError(
                f"You already have a game with the slug '{definition.slug}'"
            )
        self.save_definition(definition)
        self._packs_dir(definition.id).mkdir(parents=True, exist_ok=True)
        return definition

    def get_definition(self, definition_id: str) -> GameDefinition | None:
        if not _safe(definition_id):
            return None
        path = self._def_file(definition_id)
        if not path.is_file():
            return None
        return GameDefinition.model_validate_json(path.read_text())

    def find_definition_by_share_token(self, share_token: str) -> GameDefinition | None:
        for definition in self.list_definitions():
            if definition.share_token == share_token:
                return definition
        return None

    def list_definitions(self, creator_id: str | None = None) -> list[GameDefinition]:
        results = []
        for path in sorted(self._defs_root.glob("*.json")):
            definition = GameDefinition.model_validate_json(path.read_text())
            if creator_id is None or definition.creator_id == creator_id:
                results.append(definition)
        return results

    def save_definition(self, definition: GameDefinition) -> None:
        self._def_file(definition.id).write_text(definition.model_dump_json(indent=2))

    def delete_definition(self, definition_id: str) -> bool:
        """Delete a definition together with its packs and cards."""
        if not _safe(definition_id):
            return False
        path = self._def_file(definition_id)
        if not path.is_file():
            return False
        path.unlink()
        child_dir = self._defs_root / definition_id
        if child_dir.is_dir():
            shutil.rmtree(child_dir)
        return True

    def increment_play_count(self, definition_id: str) -> int:
        """Read-modify-write bump. Not atomic; concurrent loads may lose counts."""
        definition = self.get_definition(definition_id)
        if definition is None:
            raise FileNotFoundError(f"Definition {definition_id} does not exist")
        definition.play_count += 1
        self.save_definition(definition)
        return definition.play_count

    # ------------------------------------------------------------------
    # Card packs
    # ------------------------------------------------------------------

    def list_packs(self, definition_id: str) -> list[CardPack]:
        """Packs of a definition, core pack first, then by name."""
        packs_dir = self._packs_dir(definition_id)
        if not _safe(definition_id) or not packs_dir.is_dir():
            return []
        packs = [
            CardPack.model_validate_json(path.read_text())
            for path in packs_dir.glob("*.json")
        ]
        return sorted(packs, key=lambda p: (not p.is_core, p.name, p.id))

    def get_pack(self, pack_id: str) -> CardPack | None:
        if not _safe(pack_id):
            return None
        for path in self._defs_root.glob(f"*/packs/{pack_id}.json"):
            return CardPack.model_validate_json(path.read_text())
        return None

    def save_pack(self, pack: CardPack) -> None:
        packs_dir = self._packs_dir(pack.game_id)
        packs_dir.mkdir(parents=True, exist_ok=True)
        (packs_dir / f"{pack.id}.json").write_text(pack.model_dump_json(indent=2))

    def delete_pack(self, pack_id: str) -> bool:
        if not _safe(pack_id):
            return False
        for path in self._defs_root.glob(f"*/packs/{pack_id}.json"):
            path.unlink()
            return True
        return False

    # ------------------------------------------------------------------
    # Game sessions (room code is the file name and the unique key)
    # ------------------------------------------------------------------

    def room_code_exists(self, room_code: str) -> bool:
        return _safe(room_code) and self._session_file(room_code).exists()

    def create_session(self, session: GameSession) -> GameSession:
        path = self._session_file(session.room_code)
        try:
            with path.open("x") as f:
                f.write(session.model_dump_json(indent=2))
        except FileExistsError as e:
            raise RoomCodeTaken(f"Room code {session.room_code} is already in use") from e
        logger.debug("session stored code=%s id=%s", session.room_code, session.id)
        return session

    def get_session(self, room_code: str) -> GameSession | None:
        if not _safe(room_code):
            return None
        path = self._session_file(room_code)
        if not path.is_file():
            return None
        return GameSession.model_validate_json(path.read_text())

    def save_session(self, session: GameSession) -> None:
        self._session_file(session.room_code).write_text(session.model_dump_json(indent=2))

    def list_sessions(self) -> list[GameSession]:
        return [
            GameSession.model_validate_json(path.read_text())
            for path in sorted(self._sessions_root.glob("*.json"))
        ]
