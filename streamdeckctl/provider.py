"""Shared behaviour of tournament-provider panels.

A provider panel fetches tournaments and matches from an online bracket
service and fills the scoreboard's fields with the chosen match.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CUSTOM_TEXT = "Custom..."
CUSTOM_DATA = "custom"
NO_TOURNAMENT_TEXT = "Current Tournament: (none)"


@dataclass(frozen=True)
class TournamentTreeNode:
    """A match in a bracket, named by the ids of its two prerequisite matches."""

    child1_id: str = ""
    child2_id: str = ""


@dataclass
class LineField:
    """A single-line text field, optionally with completions."""

    text: str = ""
    enabled: bool = True
    completions: Sequence[str] = ()
    on_completion: Callable[[str], None] | None = None

    def _auto_complete(self, text: str) -> None:
        if self.on_completion is None:
            return
        for completion in self.completions:
            if completion == text:
                self.on_completion(text)


@dataclass
class SpinField:
    """A numeric field."""

    value: int = 0


@dataclass
class CheckField:
    """A check box."""

    checked: bool = False


class ChoiceBox:
    """A drop-down list of ``(text, data)`` items with a current selection."""

    def __init__(self) -> None:
        self.items: list[tuple[str, Any]] = []
        self.on_change: list[Callable[[], None]] = []
        self._current = -1

    def __len__(self) -> int:
        return len(self.items)

    @property
    def current_index(self) -> int:
        """Index of the selected item, or -1 when nothing is selected."""
        return self._current

    @current_index.setter
    def current_index(self, index: int) -> None:
        if not -1 <= index < len(self.items):
            raise IndexError(f"no item at index {index}")
        self._set_current(index)

    @property
    def current_text(self) -> str:
        """Text of the selected item, or an empty string."""
        return self.items[self._current][0] if self._current >= 0 else ""

    def add_item(self, text: str, data: Any = None) -> None:
        """Append an item; the first item added becomes selected."""
        self.items.append((text, data))
        if self._current == -1:
            self._set_current(0)

    def clear(self) -> None:
        """Remove every item."""
        self.items.clear()
        self._set_current(-1)

    def current_data(self) -> Any:
        """Data of the selected item, or None."""
        return self.items[self._current][1] if self._current >= 0 else None

    def is_last_selected(self) -> bool:
        """True when the selection is the last entry (or the box is empty)."""
        return self._current == len(self.items) - 1

    def _set_current(self, index: int) -> None:
        if index == self._current:
            return
        self._current = index
        for listener in list(self.on_change):
            listener()


Field = LineField | SpinField | CheckField


class ProviderWidget(ABC):
    """Base of panels that load tournament data and fill scoreboard fields."""

    def __init__(
        self,
        widget_list: MutableMapping[str, Field],
        settings: Mapping[str, str],
        player_one_widget_id: str = "",
        player_two_widget_id: str = "",
        player_one_country_widget_id: str = "",
        player_two_country_widget_id: str = "",
        tournament_stage_widget_id: str = "",
        bracket_widget_id: str = "",
        output_file_name: str = "",
        bracket_widgets: Mapping[str, Sequence[str]] | None = None,
        clear_widgets: Iterable[str] = (),
        custom_label_text: str = "",
    ) -> None:
        self.widget_list = widget_list
        self.settings = settings
        self.player_one_widget_id = player_one_widget_id
        self.player_two_widget_id = player_two_widget_id
        self.player_one_country_widget_id = player_one_country_widget_id
        self.player_two_country_widget_id = player_two_country_widget_id
        self.tournament_stage_widget_id = tournament_stage_widget_id
        self.bracket_widget_id = bracket_widget_id
        self.output_file_name = output_file_name
        self.bracket_widgets: dict[str, list[str]] = {
            key: list(ids) for key, ids in (bracket_widgets or {}).items()
        }
        self.clear_widgets: tuple[str, ...] = tuple(clear_widgets)
        self.custom_label_text = custom_label_text

        self.tournaments_box = ChoiceBox()
        self.tournaments_box.add_item(CUSTOM_TEXT, CUSTOM_DATA)
        self.tournament_custom_field = LineField()
        self.matches_box = ChoiceBox()
        self.current_tournament_text = NO_TOURNAMENT_TEXT
        self.status_text = ""
        self.current_tournament_json: Any = None
        self.auto_mode = False
        self.show_bracket_button = bool(self.bracket_widgets) or bool(output_file_name)

        self.tournaments_box.on_change.append(self.update_custom_id_box_state)
        self.matches_box.on_change.append(self._on_match_changed)

    # -- filling scoreboard fields -------------------------------------------

    def clear_bracket_widgets(self) -> None:
        """Empty every field that shows bracket data."""
        for widget_ids in self.bracket_widgets.values():
            for widget_id in widget_ids:
                self._line(widget_id).text = ""

    def fill_bracket_match_widget(
        self,
        match_id: str,
        player_one: str,
        player_two: str,
        score_one: str,
        score_two: str,
    ) -> None:
        """Fill the fields bound to bracket slot *match_id*, if there are any."""
        ids = self.bracket_widgets.get(match_id)
        if ids is None:
            return
        self._line(ids[0]).text = player_one
        self._line(ids[2]).text = player_two
        self._line(ids[1]).text = score_one
        self._line(ids[3]).text = score_two

    def write_bracket_to_file(self) -> bool:
        """Write the current tournament JSON to the output file.

        Returns False when no output file is configured.
        """
        if not self.output_file_name:
            return False
        path = Path(self.settings.get("outputPath", "") + self.output_file_name)
        if self.current_tournament_json is None:
            content = ""
        else:
            content = json.dumps(self.current_tournament_json, indent=4, ensure_ascii=False) + "\n"
        path.write_text(content, encoding="utf-8")
        return True

    def fill_match_widgets(
        self,
        player_one: str,
        player_two: str,
        tournament_stage: str,
        bracket: str,
    ) -> None:
        """Reset the configured fields, then fill in the players, stage and bracket."""
        for widget_id in self.clear_widgets:
            widget = self.widget_list.get(widget_id)
            if isinstance(widget, SpinField):
                widget.value = 0
            elif isinstance(widget, LineField):
                widget.text = ""
            elif isinstance(widget, CheckField):
                widget.checked = False

        one = self._optional_line(self.player_one_widget_id)
        two = self._optional_line(self.player_two_widget_id)
        if one is not None and two is not None:
            one.text = player_one
            two.text = player_two
            one._auto_complete(player_one)
            two._auto_complete(player_two)

        stage = self._optional_line(self.tournament_stage_widget_id)
        if stage is not None:
            stage.text = tournament_stage
        bracket_field = self._optional_line(self.bracket_widget_id)
        if bracket_field is not None:
            bracket_field.text = bracket

    def fill_additional_match_widgets(
        self, player_one_country: str, player_two_country: str
    ) -> None:
        """Fill both country fields when both exist."""
        one = self._optional_line(self.player_one_country_widget_id)
        two = self._optional_line(self.player_two_country_widget_id)
        if one is not None and two is not None:
            one.text = player_one_country
            two.text = player_two_country

    # -- selection state -------------------------------------------------------

    def update_custom_id_box_state(self) -> None:
        """Enable the custom id field only when the custom entry is selected."""
        self.tournament_custom_field.enabled = self.tournaments_box.is_last_selected()

    def toggle_auto_mode(self, enabled: bool) -> None:
        """Apply match data automatically whenever the selected match changes."""
        self.auto_mode = bool(enabled)

    def select_match(self, index: int) -> None:
        """Select the match at *index* in the matches list."""
        self.matches_box.current_index = index

    def selected_tournament_id(self) -> str:
        """The id of the chosen tournament, or the custom id when custom is chosen."""
        if self.tournaments_box.is_last_selected():
            return self.tournament_custom_field.text
        data = self.tournaments_box.current_data()
        return "" if data is None else str(data)

    # -- provider specific -----------------------------------------------------

    @abstractmethod
    def fetch_tournaments(self) -> None:
        """Request the list of tournaments."""

    @abstractmethod
    def fetch_matches(self) -> None:
        """Request the matches of the selected tournament."""

    @abstractmethod
    def process_tournament_list_json(self, body: str, failed: bool) -> None:
        """Handle the response to a tournament list request."""

    @abstractmethod
    def process_tournament_json(self, body: str, failed: bool) -> None:
        """Handle the response to a tournament request."""

    @abstractmethod
    def set_match_data(self) -> None:
        """Fill the scoreboard with the selected match."""

    @abstractmethod
    def set_bracket_data(self) -> None:
        """Fill bracket fields or write the bracket file."""

    # -- helpers ---------------------------------------------------------------

    def _on_match_changed(self) -> None:
        if self.auto_mode:
            self.set_match_data()

    def _line(self, widget_id: str) -> LineField:
        widget = self.widget_list[widget_id]
        if not isinstance(widget, LineField):
            raise TypeError(f"widget {widget_id!r} is not a text field")
        return widget

    def _optional_line(self, widget_id: str) -> LineField | None:
        widget = self.widget_list.get(widget_id)
        return widget if isinstance(widget, LineField) else None