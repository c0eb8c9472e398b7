"""
Suggestion engine for the metrics URL field.

Produces ranked completion fragments for a partially typed URL. Every
fragment is the suffix to append to the current input, never a
replacement. The engine is stateless; the event helpers at the bottom of
the module apply it to an InputState owned by the presentation layer.
"""

from typing import Optional

from .enums import SuggestionPhase
from .models import DEFAULT_URL_SUGGESTIONS, InputState, UrlSuggestionTable


SCHEMES = ("https://", "http://")


class SuggestionEngine:
    """
    Completes URLs phase by phase: protocol, subdomain, TLD, path.

    Results keep the declaration order of the lookup table and are
    truncated to max_suggestions entries.
    """

    def __init__(
        self,
        table: UrlSuggestionTable = DEFAULT_URL_SUGGESTIONS,
        max_suggestions: int = 5,
    ) -> None:
        if max_suggestions < 1:
            raise ValueError(f"max_suggestions must be at least 1, got {max_suggestions}")
        self._table = table
        self._max_suggestions = max_suggestions

    @property
    def table(self) -> UrlSuggestionTable:
        return self._table

    def suggest(self, text: str) -> list[str]:
        """
        Return at most max_suggestions fragments to append to text.

        Args:
            text: The current field value

        Returns:
            Ordered list of fragments, possibly empty
        """
        return self._compute(text)[1][: self._max_suggestions]

    def phase(self, text: str) -> SuggestionPhase:
        """Return which part of the URL text is currently completing."""
        return self._compute(text)[0]

    def _compute(self, text: str) -> tuple[SuggestionPhase, list[str]]:
        table = self._table

        if not text:
            return SuggestionPhase.PROTOCOL, list(table.protocols)

        scheme = _matched_scheme(text)
        if scheme is None:
            # "h", "http", "https:" are still a protocol in progress
            return SuggestionPhase.PROTOCOL, [
                p[len(text):] for p in table.protocols if p.startswith(text)
            ]

        rest = text[len(scheme):]

        if "/" in rest:
            path_part = rest.rsplit("/", 1)[-1]
            prefix = f"/{path_part}"
            return SuggestionPhase.PATH, [
                p[len(prefix):] for p in table.paths if p.startswith(prefix)
            ]

        labels = rest.split(".")

        if text.endswith("."):
            return SuggestionPhase.TLD, list(table.tlds)

        if len(labels) == 1:
            matches = [
                s[len(rest):] for s in table.subdomains if s.startswith(rest)
            ]
            if matches:
                return SuggestionPhase.SUBDOMAIN, matches
            return SuggestionPhase.TLD, list(table.tlds)

        partial = f".{labels[-1]}"
        return SuggestionPhase.TLD, [
            tld[len(partial):] for tld in table.tlds if tld.startswith(partial)
        ]


def _matched_scheme(text: str) -> Optional[str]:
    for scheme in SCHEMES:
        if text.startswith(scheme):
            return scheme
    return None


# Input event helpers


def on_input_change(engine: SuggestionEngine, state: InputState, value: str) -> InputState:
    """Store a new field value and recompute its suggestions."""
    state.value = value
    state.suggestions = engine.suggest(value)
    state.suggestions_visible = True
    return state


def on_focus(engine: SuggestionEngine, state: InputState) -> InputState:
    state.suggestions = engine.suggest(state.value)
    state.suggestions_visible = True
    return state


def on_suggestion_click(state: InputState, suggestion: str) -> InputState:
    state.value = state.value + suggestion
    state.suggestions_visible = False
    return state


def on_click_outside(state: InputState) -> InputState:
    state.suggestions_visible = False
    return state


def on_key(state: InputState, key: str) -> bool:
    """
    Handle a key press in the field.

    Tab accepts the top suggestion when the list is showing; Escape hides
    the list.

    Returns:
        True if the key was consumed and its default action must be suppressed
    """
    if key == "Tab" and state.shows_suggestions:
        on_suggestion_click(state, state.suggestions[0])
        return True
    if key == "Escape":
        state.suggestions_visible = False
    return False
