"""Text values and their entities (formatting and semantic annotations)."""

from __future__ import annotations

import dataclasses
import enum
from typing import Iterable, Optional

from loopgram.sdk import models


class EntityKind(str, enum.Enum):
    """Kinds of entities the API annotates text with."""

    MENTION = "mention"
    HASHTAG = "hashtag"
    CASHTAG = "cashtag"
    BOT_COMMAND = "bot_command"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    PRE = "pre"
    TEXT_LINK = "text_link"
    TEXT_MENTION = "text_mention"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str) -> EntityKind:
        """Map a wire ``type`` string to a kind; unseen types become UNKNOWN."""
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


@dataclasses.dataclass(frozen=True)
class Entity:
    """An annotated span.  ``offset`` and ``length`` count characters."""

    kind: EntityKind
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional[models.User] = None
    language: Optional[str] = None

    @classmethod
    def from_wire(cls, raw: models.MessageEntity) -> Entity:
        return cls(
            kind=EntityKind.parse(raw.type),
            offset=raw.offset,
            length=raw.length,
            url=raw.url,
            user=raw.user,
            language=raw.language,
        )

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclasses.dataclass(frozen=True)
class Text:
    """A string together with its entities, in ascending offset order."""

    value: str
    entities: tuple[Entity, ...] = ()

    @classmethod
    def from_wire(
        cls,
        value: Optional[str],
        entities: Optional[Iterable[models.MessageEntity]],
    ) -> Text:
        return cls(
            value=value or "",
            entities=tuple(Entity.from_wire(entity) for entity in entities or ()),
        )

    def slice(self, entity: Entity) -> str:
        """Return the characters *entity* covers."""
        return self.value[entity.offset:entity.end]
