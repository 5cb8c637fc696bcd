from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List

from pydantic import BaseModel


@dataclass(frozen=True)
class EventDef:
    name: str


FATAL_EVENT_DEF = EventDef(name="FATAL")


@dataclass
class Event:
    event_def: EventDef
    payload: BaseModel

    def to_dict(self) -> dict[str, Any]:
        # Empty fields are left out of the wire payload.
        data = {k: v for k, v in self.payload.model_dump().items() if v not in (None, "", [])}
        return {"event": self.event_def.name, "payload": data}


def new_fatal_event(payload: BaseModel) -> Event:
    return Event(event_def=FATAL_EVENT_DEF, payload=payload)


CommandHandler = Callable[[bytes | str], Event]


@dataclass
class Command:
    name: str
    handler: CommandHandler
    output_events: List[EventDef] = field(default_factory=list)


@dataclass
class PackDef:
    name: str
    commands: List[Command]
    help_url: str = ""

    def command(self, name: str) -> Command | None:
        for c in self.commands:
            if c.name == name:
                return c
        return None

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "commands": [
                {"name": c.name, "events": [e.name for e in c.output_events]}
                for c in self.commands
            ],
            "helpURL": self.help_url,
        }
