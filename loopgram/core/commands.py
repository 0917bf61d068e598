"""Command detection, parsing and trimming for text messages.

A text is a command when its first entity is a ``bot_command`` starting at
offset 0, e.g. ``/start@mybot payload``.  All offsets are character
(codepoint) offsets, which is what Python string indexing uses.
"""

import dataclasses

from loopgram.types.text import Entity, EntityKind, Text


def is_command(text: Text) -> bool:
    """Return whether *text* starts with a bot command entity."""
    if not text.entities:
        return False
    first = text.entities[0]
    return first.kind is EntityKind.BOT_COMMAND and first.offset == 0


def parse_command(text: Text) -> tuple[str, str | None]:
    """Split the leading command token into ``(command, username)``.

    ``"/foo@bar baz"`` gives ``("foo", "bar")``; ``"/foo baz"`` gives
    ``("foo", None)``.  Only call this after :func:`is_command` returned true.
    """
    token = text.value.split(maxsplit=1)[0][1:]
    parts = token.split("@")
    command = parts[0]
    username = parts[1] if len(parts) > 1 else None
    return command, username


def trim_command(text: Text) -> Text:
    """Return *text* without its command entity, command token and the
    whitespace that follows it.

    Every remaining entity is shifted left by the number of characters
    removed, so it still covers the same characters.  Only call this after
    :func:`is_command` returned true.
    """
    command_entity, *rest = text.entities
    value = text.value[command_entity.length:].lstrip()
    removed = len(text.value) - len(value)

    entities: tuple[Entity, ...] = tuple(
        dataclasses.replace(entity, offset=entity.offset - removed)
        for entity in rest
    )
    return Text(value=value, entities=entities)
