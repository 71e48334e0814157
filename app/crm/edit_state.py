"""
Inline-edit state for order item custom sizes.

A dashboard keeps one EditBoard; each (order_id, item_id) is in exactly one of
Viewing / Editing / Saving / Error. Rendering code only reads states and calls
the transition methods; the board owns the rules.

    Viewing --begin_edit--> Editing --submit--> Saving --succeed--> Viewing
    Saving --fail--> Error --begin_edit--> Editing (draft kept)
    Editing | Error --cancel--> Viewing
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from app.crm.modules.custom_sizes.utils import Triple, parse_triple

ItemKey = tuple[int, int]  # (order_id, item_id)


@dataclass(frozen=True)
class Viewing:
    pass


@dataclass(frozen=True)
class Editing:
    draft: dict[str, Any]


@dataclass(frozen=True)
class Saving:
    draft: Triple


@dataclass(frozen=True)
class Error:
    message: str
    draft: dict[str, Any]


ItemState = Union[Viewing, Editing, Saving, Error]


class InvalidTransition(RuntimeError):
    pass


@dataclass
class EditBoard:
    states: dict[ItemKey, ItemState] = field(default_factory=dict)

    def state(self, key: ItemKey) -> ItemState:
        return self.states.get(key, Viewing())

    def _expect(self, key: ItemKey, *allowed: type, action: str) -> ItemState:
        st = self.state(key)
        if not isinstance(st, allowed):
            raise InvalidTransition(f"cannot {action} item {key} while {type(st).__name__}")
        return st

    def begin_edit(self, key: ItemKey, current: dict[str, Any]) -> Editing:
        st = self._expect(key, Viewing, Error, action="edit")
        draft = dict(st.draft) if isinstance(st, Error) else dict(current)
        self.states[key] = Editing(draft)
        return self.states[key]  # type: ignore[return-value]

    def update_draft(self, key: ItemKey, **values: Any) -> Editing:
        st = self._expect(key, Editing, action="update draft of")
        draft = {**st.draft, **values}  # type: ignore[union-attr]
        self.states[key] = Editing(draft)
        return self.states[key]  # type: ignore[return-value]

    def cancel(self, key: ItemKey) -> Viewing:
        self._expect(key, Editing, Error, action="cancel")
        self.states.pop(key, None)
        return Viewing()

    def submit(self, key: ItemKey) -> Saving:
        """Validate the draft and move to Saving. InvalidArgument leaves the item in Editing."""
        st = self._expect(key, Editing, action="submit")
        triple = parse_triple(st.draft)  # type: ignore[union-attr]
        self.states[key] = Saving(triple)
        return self.states[key]  # type: ignore[return-value]

    def succeed(self, key: ItemKey) -> Viewing:
        self._expect(key, Saving, action="finish saving")
        self.states.pop(key, None)
        return Viewing()

    def fail(self, key: ItemKey, message: str) -> Error:
        st = self._expect(key, Saving, action="fail")
        self.states[key] = Error(message, st.draft._asdict())  # type: ignore[union-attr]
        return self.states[key]  # type: ignore[return-value]

    def editing_keys(self) -> list[ItemKey]:
        return [k for k, st in self.states.items() if not isinstance(st, Viewing)]
