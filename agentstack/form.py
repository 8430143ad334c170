"""Form element models consumed by connection ``configure`` hooks."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass
class SelectElement:
    name: str
    title: str
    options: Dict[str, str] = field(default_factory=dict)
    help: Optional[str] = None
    element: str = "select"


@dataclass
class InputElement:
    name: str
    title: str
    type: str = "text"
    help: Optional[str] = None
    element: str = "input"


FormElement = Union[SelectElement, InputElement]


class ElementFactory:
    """Creates form elements; hosts may pass their own factory instead."""

    def new_select(
        self, name: str, title: str, options: Mapping[str, str], help: Optional[str] = None
    ) -> SelectElement:
        return SelectElement(name=name, title=title, options=dict(options), help=help)

    def new_input(
        self, name: str, title: str, type: str = "text", help: Optional[str] = None
    ) -> InputElement:
        return InputElement(name=name, title=title, type=type, help=help)


class FormBuilder:
    """Collects form elements in registration order."""

    def __init__(self) -> None:
        self.elements: List[FormElement] = []

    def add(self, element: FormElement) -> None:
        self.elements.append(element)

    def get(self, name: str) -> FormElement:
        for element in self.elements:
            if element.name == name:
                return element
        raise KeyError(f"No form element named '{name}'.")

    def to_json(self) -> List[Dict[str, Any]]:
        return [asdict(element) for element in self.elements]
